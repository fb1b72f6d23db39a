"""
Bin Status Classification

Threshold rules mapping sensor readings to a bin status.
"""

EMPTY = 'Empty'
NORMAL = 'Normal'
FULL = 'Full'
HAZARD = 'Hazard'

BIN_STATUSES = (EMPTY, NORMAL, FULL, HAZARD)

# Statuses a citizen may report and a contractor must attend to
ATTENTION_STATUSES = (FULL, HAZARD)

HAZARD_GAS_LEVEL = 4
HAZARD_FILL_LEVEL = 95
FULL_FILL_LEVEL = 80
EMPTY_FILL_LEVEL = 20


def classify(fill_level, gas_level):
    """Get the bin status for a fill level (0-100) and gas level (1-5).

    Hazard takes precedence over every other status.
    """
    if gas_level >= HAZARD_GAS_LEVEL or fill_level >= HAZARD_FILL_LEVEL:
        return HAZARD
    if fill_level >= FULL_FILL_LEVEL:
        return FULL
    if fill_level <= EMPTY_FILL_LEVEL:
        return EMPTY
    return NORMAL
