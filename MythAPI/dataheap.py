# -*- coding: utf-8 -*-

"""
Provides the field declarations and record classes of database rows
"""

from MythAPI.static import RAWTYPE, SPACE, LATEST, SCHEMA_VERSION, \
                           RECORDING_GROUP_DEFAULT, PLAY_GROUP_DEFAULT, \
                           STORAGE_GROUP_DEFAULT, RECORDING_PROFILE_DEFAULT
from MythAPI.fields import Field, Constant, FieldSet, defaultCatalog
from MythAPI.record import PropertyAwareRecord
from MythAPI.factory import records
from MythAPI.utility import datetime

__all__ = ['JobType', 'JobStatus', 'JobCommands', 'RecordingFilters',
           'ScheduleFields', 'JobQueueFields', 'SettingFields',
           'MythFillDatabaseFields', 'MythShutdownFields', 'Schedule', 'Job',
           'Setting', 'SettingsGroup', 'MythFillDatabaseStatus',
           'MythShutdownStatus']

S = RAWTYPE.STRING
I = RAWTYPE.INTEGER
B = RAWTYPE.BOOLEAN
F = RAWTYPE.FLOAT
D = RAWTYPE.DATE
E = RAWTYPE.ENUMGROUP
G = RAWTYPE.FLAGGROUP

#### constant tables ####

JobType = FieldSet('JobType', [
    Constant('NONE',        0x0000),
    Constant('SYSTEMJOB',   0x00ff),
    Constant('TRANSCODE',   0x0001),
    Constant('COMMFLAG',    0x0002),
    Constant('METADATA',    0x0004),
    Constant('USERJOB',     0xff00),
    Constant('USERJOB1',    0x0100),
    Constant('USERJOB2',    0x0200),
    Constant('USERJOB3',    0x0400),
    Constant('USERJOB4',    0x0800)])

JobStatus = FieldSet('JobStatus', [
    Constant('UNKNOWN',     0x0000),
    Constant('QUEUED',      0x0001),
    Constant('PENDING',     0x0002),
    Constant('STARTING',    0x0003),
    Constant('RUNNING',     0x0004),
    Constant('STOPPING',    0x0005),
    Constant('PAUSED',      0x0006),
    Constant('RETRY',       0x0007),
    Constant('ERRORING',    0x0008),
    Constant('ABORTING',    0x0009),
    Constant('DONE',        0x0100),
    Constant('FINISHED',    0x0110),
    Constant('ABORTED',     0x0120),
    Constant('ERRORED',     0x0130),
    Constant('CANCELLED',   0x0140)])

JobCommands = FieldSet('JobCommands', [
    Constant('RUN',         0x0000),
    Constant('PAUSE',       0x0001),
    Constant('RESUME',      0x0002),
    Constant('STOP',        0x0004),
    Constant('RESTART',     0x0008)])

RecordingFilters = FieldSet('RecordingFilters', [
    Constant('NEW_EPISODE',         0x0001),
    Constant('IDENTIFIABLE_EPISODE', 0x0002),
    Constant('FIRST_SHOWING',       0x0004),
    Constant('PRIME_TIME',          0x0008),
    Constant('COMMERCIAL_FREE',     0x0010),
    Constant('HIGH_DEFINITION',     0x0020),
    Constant('THIS_EPISODE',        0x0040),
    Constant('THIS_SERIES',         0x0080),
    Constant('THIS_TIME',           0x0100, versions=(77,),
                                            dbversions=(1309,)),
    Constant('THIS_DAY_AND_TIME',   0x0200, versions=(77,),
                                            dbversions=(1309,)),
    Constant('THIS_CHANNEL',        0x0400, versions=(77,),
                                            dbversions=(1310,))])

#### tables ####

ScheduleFields = FieldSet('record', [
    Field('REC_ID',         I, column='recordid'),
    Field('REC_TYPE',       E, column='type', default='0',
                               group='RecordingType'),
    Field('CHANNEL_ID',     I, column='chanid'),
    Field('START_TIME',     RAWTYPE.TIME, column='starttime',
                               default='00:00:00'),
    Field('START_DATE',     RAWTYPE.DAY, column='startdate',
                               default='0000-00-00'),
    Field('END_TIME',       RAWTYPE.TIME, column='endtime',
                               default='00:00:00'),
    Field('END_DATE',       RAWTYPE.DAY, column='enddate',
                               default='0000-00-00'),
    Field('TITLE',          S, column='title', default=''),
    Field('SUBTITLE',       S, column='subtitle', default=''),
    Field('DESCRIPTION',    S, column='description', default=''),
    Field('SEASON',         I, column='season', default='0',
                               dbversions=(1277,)),
    Field('EPISODE',        I, column='episode', default='0',
                               dbversions=(1277,)),
    Field('CATEGORY',       S, column='category', default=''),
    Field('PROFILE',        S, column='profile',
                               default=RECORDING_PROFILE_DEFAULT),
    Field('REC_PRIORITY',   I, column='recpriority', default='0'),
    Field('AUTOEXPIRE',     B, column='autoexpire', default='0'),
    Field('MAX_EPISODES',   I, column='maxepisodes', default='0'),
    Field('MAX_NEWEST',     B, column='maxnewest', default='0'),
    Field('START_OFFSET',   I, column='startoffset', default='0'),
    Field('END_OFFSET',     I, column='endoffset', default='0'),
    Field('REC_GROUP',      S, column='recgroup',
                               default=RECORDING_GROUP_DEFAULT,
                               dbversions=(1029,)),
    Field('REC_DUPS',       I, column='recdups', dbversions=(0, 1029)),
    Field('DUP_METHOD',     G, column='dupmethod', default='6',
                               group='DupMethodType', dbversions=(1029,)),
    Field('DUP_IN',         G, column='dupin', default='15',
                               group='DupInType', dbversions=(1029,)),
    Field('CHANNEL_SIGN',   S, column='station', default='',
                               dbversions=(1037,)),
    Field('SERIES_ID',      S, column='seriesid', default='',
                               dbversions=(1042,)),
    Field('PROGRAM_ID',     S, column='programid', default='',
                               dbversions=(1042,)),
    Field('SEARCH',         E, column='search', default='0',
                               group='RecordingSearchType',
                               dbversions=(1047,)),
    Field('AUTO_TRANSCODE', B, column='autotranscode', default='0',
                               dbversions=(1057,)),
    Field('AUTO_COMMFLAG',  B, column='autocommflag', default='0',
                               dbversions=(1057,)),
    Field('AUTO_USERJOB_1', B, column='autouserjob1', default='0',
                               dbversions=(1057,)),
    Field('AUTO_USERJOB_2', B, column='autouserjob2', default='0',
                               dbversions=(1057,)),
    Field('AUTO_USERJOB_3', B, column='autouserjob3', default='0',
                               dbversions=(1057,)),
    Field('AUTO_USERJOB_4', B, column='autouserjob4', default='0',
                               dbversions=(1057,)),
    Field('AUTO_METADATA',  B, column='autometadata', default='0',
                               dbversions=(1278,)),
    Field('FIND_DAY',       I, column='findday', default='0',
                               dbversions=(1061,)),
    Field('FIND_TIME',      RAWTYPE.TIME, column='findtime',
                               default='00:00:00', dbversions=(1061,)),
    Field('FIND_ID',        I, column='findid', default='0',
                               dbversions=(1061,)),
    Field('INACTIVE',       B, column='inactive', default='0',
                               dbversions=(1062,)),
    Field('PARENT_ID',      I, column='parentid', default='0',
                               dbversions=(1082,)),
    Field('TRANSCODER',     I, column='transcoder', default='0',
                               dbversions=(1085,)),
    Field('TS_DEFAULT',     F, column='tsdefault', default='1.0',
                               dbversions=(1088, 1257)),
    Field('PLAY_GROUP',     S, column='playgroup',
                               default=PLAY_GROUP_DEFAULT,
                               dbversions=(1108,)),
    Field('PREF_INPUT',     I, column='prefinput', default='0',
                               dbversions=(1143,)),
    Field('NEXT_RECORD',    D, column='next_record',
                               default='0000-00-00 00:00:00',
                               dbversions=(1158,)),
    Field('LAST_RECORD',    D, column='last_record',
                               default='0000-00-00 00:00:00',
                               dbversions=(1158,)),
    Field('LAST_DELETE',    D, column='last_delete',
                               default='0000-00-00 00:00:00',
                               dbversions=(1158,)),
    Field('STORAGEGROUP',   S, column='storagegroup',
                               default=STORAGE_GROUP_DEFAULT,
                               dbversions=(1171,)),
    Field('AVG_DELAY',      I, column='avg_delay', default='100',
                               dbversions=(1193,)),
    Field('FILTER',         G, column='filter', default='0',
                               group='RecordingFilters',
                               dbversions=(1277,)),
    Field('INETREF',        S, column='inetref', default='',
                               dbversions=(1278,))],
    space=SPACE.DB)

JobQueueFields = FieldSet('jobqueue', [
    Field('ID',             I, column='id'),
    Field('CHANNEL_ID',     I, column='chanid'),
    Field('REC_START_TIME', D, column='starttime'),
    Field('INSERT_TIME',    D, column='inserttime'),
    Field('TYPE',           G, column='type', group='JobType'),
    Field('COMMANDS',       G, column='cmds', default='0',
                               group='JobCommands'),
    Field('FLAGS',          I, column='flags', default='0'),
    Field('STATUS',         E, column='status', default='0',
                               group='JobStatus'),
    Field('STATUS_TIME',    D, column='statustime'),
    Field('HOSTNAME',       S, column='hostname', default=''),
    Field('ARGS',           S, column='args', default=''),
    Field('COMMENT',        S, column='comment', default=''),
    Field('SCHEDULED_RUN_TIME', D, column='schedruntime',
                               dbversions=(1182,))],
    space=SPACE.DB)

SettingFields = FieldSet('settings', [
    Field('VALUE',          S, column='value'),
    Field('DATA',           S, column='data'),
    Field('HOSTNAME',       S, column='hostname')],
    space=SPACE.DB)

#### settings groups, 'column' naming the setting ####

MythFillDatabaseFields = FieldSet('mythfilldatabase', [
    Field('FILL_ENABLED',   B, column='MythFillEnabled'),
    Field('FILL_PERIOD',    I, column='MythFillPeriod'),
    Field('FILL_MIN_HOUR',  I, column='MythFillMinHour'),
    Field('FILL_MAX_HOUR',  I, column='MythFillMaxHour'),
    Field('FILL_USE_SUGGESTED_RUNTIME', B,
                               column='MythFillGrabberSuggestsTime'),
    Field('FILL_NEXT_SUGGESTED_RUNTIME', D,
                               column='MythFillSuggestedRunTime'),
    Field('LAST_RUN_START', D, column='mythfilldatabaseLastRunStart'),
    Field('LAST_RUN_END',   D, column='mythfilldatabaseLastRunEnd'),
    Field('LAST_RUN_STATUS', S, column='mythfilldatabaseLastRunStatus')],
    space=SPACE.DB)

MythShutdownFields = FieldSet('mythshutdown', [
    Field('IDLE_TIMEOUT',   I, column='idleTimeoutSecs'),
    Field('IDLE_WAIT_FOR_RECORDING', I, column='idleWaitForRecordingTime'),
    Field('STARTUP_BEFORE_RECORDING', I,
                               column='StartupSecsBeforeRecording'),
    Field('SHUTDOWN_LOCK',  I, column='MythShutdownLock'),
    Field('SHUTDOWN_NEXT_SCHEDULED', D, column='MythShutdownNextScheduled'),
    Field('SHUTDOWN_WAKEUP_TIME', D, column='MythShutdownWakeupTime')],
    space=SPACE.DB)

@records.record('record')
class Schedule( PropertyAwareRecord ):
    """
    Schedule(version=LATEST, tokens=None, schemaVersion=SCHEMA_VERSION)
                    -> Schedule object

    A recording rule, as stored in the 'record' table.
    """
    _fieldset = 'record'

    def __repr__(self):
        return "<Schedule '%s','%s' at %s>" % \
                (self.title, self.rec_type, hex(id(self)))

    @classmethod
    def fromProgram(cls, prog, rectype, schemaVersion=SCHEMA_VERSION,
                          **kwargs):
        """
        Schedule.fromProgram(prog, rectype, schemaVersion=SCHEMA_VERSION)
                    -> Schedule object

        Builds a new rule recording 'prog', 'rectype' naming one of the
            RecordingType constants.
        """
        rule = cls(prog.version, None, schemaVersion, **kwargs)
        rule.get('REC_TYPE').setEnum(rectype)
        for field in ('TITLE', 'SUBTITLE', 'DESCRIPTION', 'CATEGORY',
                      'CHANNEL_ID', 'CHANNEL_SIGN', 'SERIES_ID',
                      'PROGRAM_ID', 'SEASON', 'EPISODE', 'INETREF'):
            rule.set(field, prog.get(field))
        start, end = prog.get('START_DATE_TIME'), prog.get('END_DATE_TIME')
        if rule.useUTC:
            start = start.astimezone(datetime.UTCTZ()) if start else None
            end = end.astimezone(datetime.UTCTZ()) if end else None
        if start is not None:
            rule.set('START_DATE', start.date())
            rule.set('START_TIME', start.time())
        if end is not None:
            rule.set('END_DATE', end.date())
            rule.set('END_TIME', end.time())
        return rule

@records.record('jobqueue')
class Job( PropertyAwareRecord ):
    """
    Job(version=LATEST, tokens=None, schemaVersion=SCHEMA_VERSION)
                    -> Job object

    An entry of the 'jobqueue' table.
    """
    _fieldset = 'jobqueue'

    def __repr__(self):
        return "<Job '%s' at %s>" % (self.id, hex(id(self)))

    def setStatus(self, status):
        """Job.setStatus(status) -> None, 'status' a JobStatus constant"""
        self.get('STATUS').setEnum(status)

    def hasType(self, jobtype):
        jobtypes = self.get('TYPE')
        return (jobtypes is not None) and jobtypes.isSet(jobtype)

    @classmethod
    def fromProgram(cls, prog, jobtype, hostname='', args='',
                          schemaVersion=SCHEMA_VERSION, **kwargs):
        """
        Job.fromProgram(prog, jobtype, hostname='', args='',
                    schemaVersion=SCHEMA_VERSION) -> Job object

        Builds a queued job of 'jobtype' for the recording 'prog'.
        """
        job = cls(prog.version, None, schemaVersion, **kwargs)
        job.set('CHANNEL_ID', prog.get('CHANNEL_ID'))
        job.set('REC_START_TIME', prog.get('REC_START_TIME'))
        job.set('INSERT_TIME', datetime.now())
        job.set('TYPE', 0)
        job.get('TYPE').set(jobtype)
        job.setStatus('QUEUED')
        job.set('HOSTNAME', hostname)
        job.set('ARGS', args)
        return job

@records.record('settings')
class Setting( PropertyAwareRecord ):
    """
    Setting(version=LATEST, tokens=None, schemaVersion=SCHEMA_VERSION)
                    -> Setting object

    A single named value of the 'settings' table.
    """
    _fieldset = 'settings'

    def __repr__(self):
        return "<Setting '%s','%s' at %s>" % \
                (self.value, self.hostname, hex(id(self)))

class SettingsGroup( PropertyAwareRecord ):
    """
    A group of values of the 'settings' table, decoded as a single record.
        Each field names the setting it is read from in its 'column'.
    """

    @classmethod
    def settingNames(cls, schemaVersion=SCHEMA_VERSION, catalog=None):
        """Returns the names of the settings in use at 'schemaVersion'."""
        if catalog is None:
            catalog = defaultCatalog()
        return catalog.columns(cls._fieldset, schemaVersion)

    @classmethod
    def fromSettings(cls, settings, schemaVersion=SCHEMA_VERSION, **kwargs):
        """
        obj.fromSettings(settings, schemaVersion=SCHEMA_VERSION)
                    -> settings group

        'settings' maps setting names to their data, or to Setting
            objects.  Settings missing from it are left unset.
        """
        names = cls.settingNames(schemaVersion, kwargs.get('catalog'))
        tokens = []
        for name in names:
            data = settings.get(name)
            if isinstance(data, Setting):
                data = data.getRaw('DATA')
            tokens.append(data)
        return cls(LATEST, tokens, schemaVersion, **kwargs)

def _minutes(start, end):
    # truncated towards zero
    return int((end - start).total_seconds()/60)

@records.record('mythfilldatabase')
class MythFillDatabaseStatus( SettingsGroup ):
    """
    The guide data grabber settings, and the status of its last run.
    """
    _fieldset = 'mythfilldatabase'

    def suggestedRunTime(self):
        """
        Returns the run time suggested by the grabber, or None if it
            precedes the start of the last run.
        """
        suggested = self.get('FILL_NEXT_SUGGESTED_RUNTIME')
        start = self.get('LAST_RUN_START')
        if (suggested is None) or ((start is not None) and \
                                   (suggested < start)):
            return None
        return suggested

    def lastRunDuration(self):
        """Returns the length of the last run in minutes, or None."""
        start, end = self.get('LAST_RUN_START'), self.get('LAST_RUN_END')
        if (start is None) or (end is None):
            return None
        return _minutes(start, end)

    def isRunning(self):
        start, end = self.get('LAST_RUN_START'), self.get('LAST_RUN_END')
        if start is None:
            return False
        return (end is None) or (start > end)

@records.record('mythshutdown')
class MythShutdownStatus( SettingsGroup ):
    """
    The idle shutdown and wakeup settings of the master backend.
    """
    _fieldset = 'mythshutdown'

    def isShutdownLocked(self):
        return (self.get('SHUTDOWN_LOCK') or 0) > 0

    def isShutdownEnabled(self):
        return (self.get('IDLE_TIMEOUT') or 0) > 0

    def startupMode(self, startup):
        """
        obj.startupMode(startup) -> 'AUTOMATICALLY', 'MANUALLY' or 'UNKNOWN'

        Guesses how a system started at 'startup' was woken, a start
            within 15 minutes of the scheduled wakeup being taken as
            automatic.
        """
        wakeup = self.get('SHUTDOWN_WAKEUP_TIME')
        if (wakeup is None) or (startup is None):
            return 'UNKNOWN'
        diff = _minutes(datetime.duck(startup), wakeup)
        if abs(diff) <= 15:
            return 'AUTOMATICALLY'
        if diff > 0:
            return 'MANUALLY'
        return 'UNKNOWN'
