from datetime import date, time

import pytest

from MythAPI.static import SCHEMA_VERSION
from MythAPI.mythproto import Program
from MythAPI.dataheap import Schedule, Job, Setting, \
                             MythFillDatabaseStatus, MythShutdownStatus
from MythAPI.utility import datetime


def recorded_program():
    prog = Program(88)
    prog.title = 'News'
    prog.channel_id = 1001
    prog.series_id = 'EP0001'
    prog.start_date_time = datetime(2012, 5, 1, 12, 0, 0)
    prog.end_date_time = datetime(2012, 5, 1, 13, 30, 0)
    prog.rec_start_time = datetime(2012, 5, 1, 12, 0, 0)
    return prog


def test_new_schedule_defaults():
    rule = Schedule()
    assert rule.schemaVersion == SCHEMA_VERSION
    assert rule.rec_type.name == 'NOT_RECORDING'
    assert rule.profile == 'Default'
    assert rule.dup_in.isSet('DUPS_IN_ALL')
    assert rule.avg_delay == 100


def test_schedule_from_program_in_utc():
    rule = Schedule.fromProgram(recorded_program(), 'SINGLE_RECORD')
    assert rule.rec_type.name == 'SINGLE_RECORD'
    assert rule.getRaw('REC_TYPE') == '1'
    assert rule.title == 'News'
    assert rule.channel_id == 1001
    assert rule.series_id == 'EP0001'
    assert rule.start_date == date(2012, 5, 1)
    assert rule.start_time == time(10, 0)
    assert rule.end_time == time(11, 30)


def test_schedule_from_program_in_local_time():
    rule = Schedule.fromProgram(recorded_program(), 'ALL_RECORD',
                                schemaVersion=1300)
    assert not rule.useUTC
    assert rule.start_time == time(12, 0)
    assert rule.end_time == time(13, 30)
    assert rule.inetref == ''


def test_schedule_layout_follows_schema():
    assert len(Schedule(schemaVersion=1344)) > len(Schedule(schemaVersion=1100))
    assert Schedule(schemaVersion=1100).season is None


def test_job_from_program():
    job = Job.fromProgram(recorded_program(), 'COMMFLAG', hostname='be1')
    assert job.hasType('COMMFLAG')
    assert not job.hasType('TRANSCODE')
    assert job.status.name == 'QUEUED'
    assert job.hostname == 'be1'
    assert job.channel_id == 1001
    assert job.getRaw('REC_START_TIME') == '2012-05-01 10:00:00'
    assert job.insert_time is not None


def test_job_status_changes():
    job = Job.fromProgram(recorded_program(), 'TRANSCODE')
    job.setStatus('RUNNING')
    assert job.getRaw('STATUS') == '4'
    assert str(job.status) == 'RUNNING'


def test_schedule_filter_is_a_flag_group():
    rule = Schedule()
    assert rule.filter.activeFlags() == []
    assert rule.filter.set('THIS_CHANNEL')
    assert rule.filter.set('NEW_EPISODE')
    assert rule.getRaw('FILTER') == '1025'
    assert rule.filter.THIS_CHANNEL


def test_schedule_filters_follow_schema():
    rule = Schedule(schemaVersion=1309)
    assert rule.filter.set('THIS_TIME')
    assert not rule.filter.set('THIS_CHANNEL')
    assert rule.getRaw('FILTER') == '256'
    names = [f.name for f in rule.filter.supported()]
    assert 'THIS_DAY_AND_TIME' in names
    assert 'THIS_CHANNEL' not in names
    old = Schedule(schemaVersion=1277)
    assert [f.name for f in old.filter.supported()][-1] == 'THIS_SERIES'


def test_schedule_filter_from_row():
    rule = Schedule()
    rule.setRaw('FILTER', '65')
    assert [f.name for f in rule.filter.activeFlags()] == \
            ['NEW_EPISODE', 'THIS_EPISODE']


FILL_SETTINGS = {
    'MythFillEnabled':                  '1',
    'MythFillPeriod':                   '1',
    'MythFillMinHour':                  '2',
    'MythFillMaxHour':                  '5',
    'MythFillGrabberSuggestsTime':      '1',
    'MythFillSuggestedRunTime':         '2012-05-02T03:00:00',
    'mythfilldatabaseLastRunStart':     '2012-05-01T10:00:00',
    'mythfilldatabaseLastRunEnd':       '2012-05-01T10:42:30',
    'mythfilldatabaseLastRunStatus':    'Successful.',
}


def test_fill_status_from_settings():
    status = MythFillDatabaseStatus.fromSettings(FILL_SETTINGS)
    assert status.fill_enabled is True
    assert status.fill_min_hour == 2
    assert status.fill_max_hour == 5
    assert status.last_run_status == 'Successful.'
    assert status.last_run_start == datetime(2012, 5, 1, 12, 0, 0)
    assert status.lastRunDuration() == 42
    assert not status.isRunning()
    assert status.suggestedRunTime() == datetime(2012, 5, 2, 5, 0, 0)


def test_fill_status_in_local_time():
    status = MythFillDatabaseStatus.fromSettings(FILL_SETTINGS,
                                                 schemaVersion=1300)
    assert status.last_run_start == datetime(2012, 5, 1, 10, 0, 0)


def test_fill_status_while_running():
    settings = dict(FILL_SETTINGS)
    settings['mythfilldatabaseLastRunStart'] = '2012-05-01T11:00:00'
    settings['MythFillSuggestedRunTime'] = '2012-05-01T09:00:00'
    status = MythFillDatabaseStatus.fromSettings(settings)
    assert status.isRunning()
    assert status.lastRunDuration() == -17
    assert status.suggestedRunTime() is None


def test_missing_settings_are_unset():
    status = MythFillDatabaseStatus.fromSettings({})
    assert status.fill_enabled is False
    assert status.fill_period is None
    assert status.lastRunDuration() is None
    assert not status.isRunning()
    assert MythShutdownStatus.fromSettings({}).startupMode(
                datetime(2012, 5, 1, 12, 0, 0)) == 'UNKNOWN'


def test_setting_names():
    assert MythShutdownStatus.settingNames() == [
        'idleTimeoutSecs', 'idleWaitForRecordingTime',
        'StartupSecsBeforeRecording', 'MythShutdownLock',
        'MythShutdownNextScheduled', 'MythShutdownWakeupTime']


@pytest.mark.parametrize('startup, mode', [
    (datetime(2012, 5, 1, 11, 50, 0), 'AUTOMATICALLY'),
    (datetime(2012, 5, 1, 12, 15, 0), 'AUTOMATICALLY'),
    (datetime(2012, 5, 1, 11, 0, 0),  'MANUALLY'),
    (datetime(2012, 5, 1, 13, 0, 0),  'UNKNOWN'),
])
def test_shutdown_startup_mode(startup, mode):
    status = MythShutdownStatus.fromSettings({
        'idleTimeoutSecs':          '300',
        'MythShutdownLock':         '0',
        'MythShutdownWakeupTime':   '2012-05-01T10:00:00'})
    assert status.isShutdownEnabled()
    assert not status.isShutdownLocked()
    assert status.startupMode(startup) == mode


def test_shutdown_status_from_setting_records():
    lock = Setting(tokens=['MythShutdownLock', '2', None])
    status = MythShutdownStatus.fromSettings({'MythShutdownLock': lock})
    assert status.shutdown_lock == 2
    assert status.isShutdownLocked()
    assert not status.isShutdownEnabled()
