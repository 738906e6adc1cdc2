import pytest

from healthagg.constants import (
    BODY_FAT_PERCENTAGE, BODY_MASS, BODY_MASS_INDEX, HEART_RATE,
    LEAN_BODY_MASS, SLEEP_ANALYSIS, STEP_COUNT,
)
from healthagg.models import ExportRow, Quantity, SleepSummary
from healthagg.parsers import (
    BodyFatPercentageParser,
    BodyMassIndexParser,
    BodyMassParser,
    HeartRateParser,
    LeanBodyMassParser,
    ParserRegistry,
    SleepAnalysisParser,
    StepCountParser,
    default_registry,
)


ALL_PARSERS = [
    StepCountParser,
    SleepAnalysisParser,
    BodyMassParser,
    BodyMassIndexParser,
    LeanBodyMassParser,
    BodyFatPercentageParser,
    HeartRateParser,
]


@pytest.mark.parametrize('parser_class', ALL_PARSERS)
def test_empty_input_gives_empty_output(parser_class):
    assert parser_class().parse_file([]) == []


# Step count

def test_steps_summed_per_day(point_row):
    rows = [
        point_row(STEP_COUNT, '2025-08-23 10:00:00 +0000', 100),
        point_row(STEP_COUNT, '2025-08-23 11:00:00 +0000', 100),
    ]
    days = StepCountParser().parse_file(rows)
    assert len(days) == 1
    assert days[0].date == '2025-08-23'
    assert days[0].metrics == {'StepCount': 200}


def test_steps_split_across_dates(point_row):
    rows = [
        point_row(STEP_COUNT, '2025-08-23 22:20:00 +0000', 9),
        point_row(STEP_COUNT, '2025-08-24 00:10:00 +0000', 8),
    ]
    days = {d.date: d for d in StepCountParser().parse_file(rows)}
    assert days['2025-08-23'].metrics['StepCount'] == 9
    assert days['2025-08-24'].metrics['StepCount'] == 8


def test_steps_from_other_sources_dropped(point_row):
    rows = [point_row(STEP_COUNT, '2025-08-23 20:41:09 +0000', 48, source='iPhone 11')]
    parser = StepCountParser()
    assert parser.parse_file(rows) == []
    assert parser.errors == []


def test_step_allow_list_is_configurable(point_row):
    rows = [point_row(STEP_COUNT, '2025-08-23 20:41:09 +0000', 48, source='iPhone 11')]
    days = StepCountParser(allowed_sources=['iPhone 11']).parse_file(rows)
    assert days[0].metrics['StepCount'] == 48


def test_step_values_rounded(point_row):
    rows = [point_row(STEP_COUNT, '2025-08-23 19:50:00 +0000', '15.666666')]
    assert StepCountParser().parse_file(rows)[0].metrics['StepCount'] == 15.67


def test_step_value_with_line_ending(point_row):
    rows = [point_row(STEP_COUNT, '2025-08-23 19:50:00 +0000', '15.0\r\n')]
    assert StepCountParser().parse_file(rows)[0].metrics['StepCount'] == 15


def test_short_row_skipped_and_recorded():
    row = ExportRow((STEP_COUNT, 'Zepp Life', '202503131848'))
    parser = StepCountParser()
    assert parser.parse_file([row]) == []
    assert len(parser.errors) == 1


def test_unparsable_value_skipped(point_row):
    rows = [
        point_row(STEP_COUNT, '2025-08-23 10:00:00 +0000', 'abc'),
        point_row(STEP_COUNT, '2025-08-23 11:00:00 +0000', 10),
    ]
    parser = StepCountParser()
    days = parser.parse_file(rows)
    assert days[0].metrics['StepCount'] == 10
    assert len(parser.errors) == 1


# Body composition

def test_body_mass_last_value_wins(point_row):
    rows = [
        point_row(BODY_MASS, '2025-08-23 07:00:00 +0000', 75.2, unit='kg'),
        point_row(BODY_MASS, '2025-08-23 08:00:00 +0000', 74.8, unit='kg'),
    ]
    days = BodyMassParser().parse_file(rows)
    assert len(days) == 1
    assert days[0].metrics == {'BodyMass': 74.8}


def test_body_mass_rounded(point_row):
    rows = [point_row(BODY_MASS, '2025-08-23 07:00:00 +0000', '89.05000305175781', unit='kg')]
    assert BodyMassParser().parse_file(rows)[0].metrics['BodyMass'] == 89.05


@pytest.mark.parametrize('raw, expected', [
    ('0.263', 26.3),
    ('0.05', 5),
    ('0.15', 15),
])
def test_body_fat_stored_as_percentage(point_row, raw, expected):
    rows = [point_row(BODY_FAT_PERCENTAGE, '2025-08-23 07:00:00 +0000', raw, unit='%')]
    days = BodyFatPercentageParser().parse_file(rows)
    assert days[0].metrics['BodyFatPercentage'] == expected


def test_bmi_and_lean_mass_keys(point_row):
    bmi = BodyMassIndexParser().parse_file(
        [point_row(BODY_MASS_INDEX, '2025-08-23 07:00:00 +0000', 26.3)]
    )
    lean = LeanBodyMassParser().parse_file(
        [point_row(LEAN_BODY_MASS, '2025-08-23 07:00:00 +0000', 60.5, unit='kg')]
    )
    assert bmi[0].metrics == {'BodyMassIndex': 26.3}
    assert lean[0].metrics == {'LeanBodyMass': 60.5}


# Heart rate

def test_heart_rate_average_max_min(point_row):
    rows = [
        point_row(HEART_RATE, '2025-08-23 07:00:00 +0000', 60, unit='count/min'),
        point_row(HEART_RATE, '2025-08-23 08:00:00 +0000', 70, unit='count/min'),
        point_row(HEART_RATE, '2025-08-23 09:00:00 +0000', 81, unit='count/min'),
        point_row(HEART_RATE, '2025-08-24 09:00:00 +0000', 55, unit='count/min'),
    ]
    days = {d.date: d for d in HeartRateParser().parse_file(rows)}

    heart_rate = days['2025-08-23'].metrics['HeartRate']
    assert heart_rate['average'] == Quantity(70.33, 'count/min')
    assert heart_rate['max'] == Quantity(81, 'count/min')
    assert heart_rate['min'] == Quantity(60, 'count/min')

    single = days['2025-08-24'].metrics['HeartRate']
    assert single['average'].value == single['max'].value == single['min'].value == 55


# Sleep

def test_sleep_rows_become_one_session(sleep_row):
    rows = [
        sleep_row('2025-08-24 01:00:00 +0000', '2025-08-24 02:00:00 +0000', 'asleepCore'),
        sleep_row('2025-08-24 02:00:00 +0000', '2025-08-24 02:30:00 +0000', 'asleepREM'),
        sleep_row('2025-08-24 02:30:00 +0000', '2025-08-24 06:00:00 +0000', 'asleepCore'),
    ]
    days = SleepAnalysisParser().parse_file(rows)
    assert len(days) == 1
    assert days[0].date == '2025-08-24'
    assert days[0].metrics['Sleep'] == SleepSummary(
        core='4h 30m', deep='0h 0m', rem='0h 30m', total='5h 0m', wake_ups=0,
    )


def test_sleep_long_stage_names_normalized(sleep_row):
    rows = [
        sleep_row(
            '2025-08-24 01:00:00 +0000', '2025-08-24 02:00:00 +0000',
            'HKCategoryValueSleepAnalysisAsleepDeep',
        ),
    ]
    summary = SleepAnalysisParser().parse_file(rows)[0].metrics['Sleep']
    assert summary.deep == '1h 0m'


def test_sleep_short_row_skipped():
    row = ExportRow((SLEEP_ANALYSIS, 'Zepp Life', '202503131848'))
    assert SleepAnalysisParser().parse_file([row]) == []


def test_sleep_row_without_timestamps_skipped(sleep_row):
    rows = [sleep_row('', '', 'asleepCore')]
    parser = SleepAnalysisParser()
    assert parser.parse_file(rows) == []
    assert parser.errors


def test_sleep_nap_and_night_on_same_date(sleep_row):
    rows = [
        sleep_row('2025-08-24 14:00:00 +0000', '2025-08-24 14:30:00 +0000', 'asleepCore'),
        sleep_row('2025-08-24 22:00:00 +0000', '2025-08-24 22:10:00 +0000', 'awake'),
        sleep_row('2025-08-24 22:10:00 +0000', '2025-08-24 23:50:00 +0000', 'asleepCore'),
    ]
    days = SleepAnalysisParser().parse_file(rows)
    assert [d.date for d in days] == ['2025-08-24']
    summary = days[0].metrics['Sleep']
    assert summary.wake_ups == 0
    assert summary.core == '2h 10m'


def test_sleep_row_ending_before_start_skipped(sleep_row):
    rows = [
        sleep_row('2025-08-24 03:00:00 +0000', '2025-08-24 01:10:00 +0000', 'asleepCore'),
        sleep_row('2025-08-24 03:00:00 +0000', '2025-08-24 04:00:00 +0000', 'asleepDeep'),
    ]
    parser = SleepAnalysisParser()
    days = parser.parse_file(rows)
    assert days[0].metrics['Sleep'].core == '0h 0m'
    assert days[0].metrics['Sleep'].deep == '1h 0m'
    assert parser.records_parsed == 1
    assert len(parser.errors) == 1


@pytest.mark.parametrize('parser_cls, metric_type', [
    (BodyMassParser, BODY_MASS),
    (StepCountParser, STEP_COUNT),
    (HeartRateParser, HEART_RATE),
])
@pytest.mark.parametrize('start', ['', 'n/a', '2025-13-40 07:00:00 +0000'])
def test_row_without_calendar_date_skipped(point_row, parser_cls, metric_type, start):
    parser = parser_cls()
    rows = [
        point_row(metric_type, start, 80),
        point_row(metric_type, '2025-08-23 07:00:00 +0000', 75),
    ]
    days = parser.parse_file(rows)
    assert [d.date for d in days] == ['2025-08-23']
    assert len(parser.errors) == 1


# Registry

def test_default_registry_order():
    assert default_registry().list_parsers() == [
        'StepCount',
        'Sleep',
        'BodyMass',
        'BodyMassIndex',
        'LeanBodyMass',
        'BodyFatPercentage',
        'HeartRate',
    ]


def test_registry_routes_by_exact_metric_type(point_row):
    registry = default_registry()
    rows = [
        point_row(BODY_MASS, '2025-08-23 07:00:00 +0000', 75),
        point_row('HKQuantityTypeIdentifierBodyTemperature', '2025-08-23 07:00:00 +0000', 36.6),
    ]
    routed, unclaimed = registry.route(rows)
    assert routed['BodyMass'] == [rows[0]]
    assert unclaimed == [rows[1]]
    assert registry.get_parser_for('HKQuantityTypeIdentifierBodyTemperature') is None


def test_registry_lookup_by_name():
    registry = default_registry()
    assert isinstance(registry.get_parser_by_name('HeartRate'), HeartRateParser)
    assert registry.get_parser_by_name('Unknown') is None


def test_registry_rejects_duplicate_metric_type():
    with pytest.raises(ValueError):
        ParserRegistry([BodyMassParser(), BodyMassParser()])
