"""Default effect-mapping catalog for new users."""
from sqlalchemy.orm import Session

from brewlog.models.effect_mapping import (
    Confidence,
    Effect,
    EffectDirection,
    EffectMapping,
    InputVariable,
    MappingDirection,
    OutputVariable,
)
from brewlog.models.user import User


# Effect tuples are (output_variable, direction, confidence, range_min, range_max)
DEFAULT_MAPPINGS = [
    {
        'name': 'Increase water temperature',
        'variable': InputVariable.TEMPERATURE,
        'direction': MappingDirection.INCREASE,
        'tick_description': '+2°C',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.SWEETNESS, EffectDirection.INCREASE, Confidence.MEDIUM, 0.5, 1.0),
            (OutputVariable.BITTERNESS, EffectDirection.INCREASE, Confidence.MEDIUM, 0.5, 1.0),
            (OutputVariable.BODY, EffectDirection.INCREASE, Confidence.LOW, None, None),
        ],
    },
    {
        'name': 'Decrease water temperature',
        'variable': InputVariable.TEMPERATURE,
        'direction': MappingDirection.DECREASE,
        'tick_description': '-2°C',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.ACIDITY, EffectDirection.INCREASE, Confidence.LOW, None, None),
            (OutputVariable.BITTERNESS, EffectDirection.DECREASE, Confidence.MEDIUM, 0.5, 1.0),
        ],
    },
    {
        'name': 'Grind finer',
        'variable': InputVariable.GRIND_SIZE,
        'direction': MappingDirection.DECREASE,
        'tick_description': '1 click finer',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.ACIDITY, EffectDirection.DECREASE, Confidence.MEDIUM, 0.5, 1.5),
            (OutputVariable.SWEETNESS, EffectDirection.INCREASE, Confidence.HIGH, 0.5, 1.5),
            (OutputVariable.BITTERNESS, EffectDirection.INCREASE, Confidence.MEDIUM, 0.5, 1.0),
            (OutputVariable.BODY, EffectDirection.INCREASE, Confidence.MEDIUM, None, None),
        ],
    },
    {
        'name': 'Grind coarser',
        'variable': InputVariable.GRIND_SIZE,
        'direction': MappingDirection.INCREASE,
        'tick_description': '1 click coarser',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.ACIDITY, EffectDirection.INCREASE, Confidence.MEDIUM, 0.5, 1.5),
            (OutputVariable.BITTERNESS, EffectDirection.DECREASE, Confidence.HIGH, 0.5, 1.5),
            (OutputVariable.BODY, EffectDirection.DECREASE, Confidence.MEDIUM, None, None),
        ],
    },
    {
        'name': 'Tighten brew ratio',
        'variable': InputVariable.RATIO,
        'direction': MappingDirection.DECREASE,
        'tick_description': '1:16 to 1:15',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.BODY, EffectDirection.INCREASE, Confidence.HIGH, 0.5, 1.5),
            (OutputVariable.AROMA, EffectDirection.INCREASE, Confidence.LOW, None, None),
        ],
    },
    {
        'name': 'Lengthen bloom',
        'variable': InputVariable.BLOOM_TIME,
        'direction': MappingDirection.INCREASE,
        'tick_description': '+15s',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.SWEETNESS, EffectDirection.INCREASE, Confidence.LOW, None, None),
            (OutputVariable.AROMA, EffectDirection.INCREASE, Confidence.MEDIUM, None, None),
            (OutputVariable.ACIDITY, EffectDirection.NONE, Confidence.LOW, None, None),
        ],
    },
    {
        'name': 'Shorten total brew time',
        'variable': InputVariable.TOTAL_BREW_TIME,
        'direction': MappingDirection.DECREASE,
        'tick_description': '-20s',
        'source': 'Common pour-over guidance',
        'effects': [
            (OutputVariable.BITTERNESS, EffectDirection.DECREASE, Confidence.MEDIUM, 0.5, 1.0),
            (OutputVariable.BODY, EffectDirection.DECREASE, Confidence.LOW, None, None),
        ],
    },
]


def seed_mappings_for_user(db: Session, user: User) -> int:
    """
    Add the default catalog to a user's effect mappings.

    Returns the number of mappings created (0 if the user already has any).
    """
    existing = db.query(EffectMapping).filter(EffectMapping.user_id == user.id).count()
    if existing > 0:
        return 0

    for spec in DEFAULT_MAPPINGS:
        mapping = EffectMapping(
            user_id=user.id,
            name=spec['name'],
            variable=spec['variable'],
            direction=spec['direction'],
            tick_description=spec['tick_description'],
            source=spec['source'],
        )
        mapping.effects = [
            Effect(
                position=position,
                output_variable=output_variable,
                direction=direction,
                confidence=confidence,
                range_min=range_min,
                range_max=range_max,
            )
            for position, (output_variable, direction, confidence, range_min, range_max)
            in enumerate(spec['effects'])
        ]
        db.add(mapping)

    db.commit()
    return len(DEFAULT_MAPPINGS)
