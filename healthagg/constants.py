"""
Identifiers and thresholds shared across the engine.
"""

from datetime import timedelta

# Metric-type identifiers (first field of every export row)
STEP_COUNT = 'HKQuantityTypeIdentifierStepCount'
SLEEP_ANALYSIS = 'HKCategoryTypeIdentifierSleepAnalysis'
BODY_MASS = 'HKQuantityTypeIdentifierBodyMass'
BODY_MASS_INDEX = 'HKQuantityTypeIdentifierBodyMassIndex'
LEAN_BODY_MASS = 'HKQuantityTypeIdentifierLeanBodyMass'
BODY_FAT_PERCENTAGE = 'HKQuantityTypeIdentifierBodyFatPercentage'
HEART_RATE = 'HKQuantityTypeIdentifierHeartRate'

# Metric keys inside DayRecord.metrics
STEP_COUNT_KEY = 'StepCount'
SLEEP_KEY = 'Sleep'
BODY_MASS_KEY = 'BodyMass'
BODY_MASS_INDEX_KEY = 'BodyMassIndex'
LEAN_BODY_MASS_KEY = 'LeanBodyMass'
BODY_FAT_PERCENTAGE_KEY = 'BodyFatPercentage'
HEART_RATE_KEY = 'HeartRate'
FFMI_KEY = 'FFMI'
BCI_KEY = 'BCI'

# Row layout
FIELD_TYPE = 0
FIELD_SOURCE_NAME = 1
FIELD_START = 5
FIELD_END = 6
FIELD_STAGE = 7
FIELD_UNIT = 7
FIELD_VALUE = 8

MIN_INTERVAL_FIELDS = 8
MIN_POINT_FIELDS = 9

# Header lines at the top of every export file: "sep=," and the column names
HEADER_LINES = 2

# Step sources that report complete daily totals
STEP_SOURCES = ('Zepp Life',)

# Sleep
SLEEP_SESSION_GAP = timedelta(minutes=30)

ASLEEP_CORE = 'asleepCore'
ASLEEP_DEEP = 'asleepDeep'
ASLEEP_REM = 'asleepREM'
AWAKE = 'awake'
IN_BED = 'inBed'

ASLEEP_STATES = (ASLEEP_CORE, ASLEEP_DEEP, ASLEEP_REM)
SLEEP_STATES = ASLEEP_STATES + (AWAKE, IN_BED)

SLEEP_VALUE_PREFIX = 'HKCategoryValueSleepAnalysis'

MINUTES_PER_HOUR = 60
