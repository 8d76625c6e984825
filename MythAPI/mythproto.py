# -*- coding: utf-8 -*-

"""
Provides the field declarations and record classes of backend protocol
responses.
"""

from MythAPI.static import RAWTYPE, RECORDING_GROUP_DEFAULT, \
                           PLAY_GROUP_DEFAULT, STORAGE_GROUP_DEFAULT, \
                           PROTO_VERSION
from MythAPI.fields import Field, Constant, FieldSet
from MythAPI.record import PropertyAwareRecord
from MythAPI.factory import records
from MythAPI.codec import Codec
from MythAPI.utility import datetime

__all__ = ['ProgramFlags', 'RecordingStatus', 'RecordingType',
           'RecordingSearchType', 'DupInType', 'DupMethodType',
           'AudioProperties', 'VideoProperties', 'SubtitleType',
           'CategoryType', 'ProgramInfo', 'FreeSpaceInfo', 'FreeSpace',
           'Program']

S = RAWTYPE.STRING
I = RAWTYPE.INTEGER
L = RAWTYPE.LONG
B = RAWTYPE.BOOLEAN
F = RAWTYPE.FLOAT
D = RAWTYPE.DATE
E = RAWTYPE.ENUMGROUP
G = RAWTYPE.FLAGGROUP

#### constant tables ####

ProgramFlags = FieldSet('ProgramFlags', [
    Constant('FL_NONE',             0x00000000, versions=(57,)),
    Constant('FL_COMMFLAG',         0x00000001),
    Constant('FL_CUTLIST',          0x00000002),
    Constant('FL_AUTOEXP',          0x00000004),
    Constant('FL_EDITING',          0x00000008),
    Constant('FL_BOOKMARK',         0x00000010),
    Constant('FL_INUSERECORDING',   (21, 0x00000020), (57, 0x00100000),
                                    versions=(21,)),
    Constant('FL_INUSEPLAYING',     (23, 0x00000040), (57, 0x00200000),
                                    versions=(23,)),
    Constant('FL_STEREO',           0x00000080, versions=(27, 35)),
    Constant('FL_REALLYEDITING',    (53, 0x00000080), (57, 0x00000020),
                                    versions=(53,)),
    Constant('FL_CC',               0x00000100, versions=(27, 35)),
    Constant('FL_COMMPROCESSING',   (53, 0x00000100), (57, 0x00000040),
                                    versions=(53,)),
    Constant('FL_HDTV',             0x00000200, versions=(27, 35)),
    Constant('FL_DELETEPENDING',    (53, 0x00000200), (57, 0x00000080),
                                    versions=(53,)),
    Constant('FL_TRANSCODED',       (28, 0x00000400), (57, 0x00000100),
                                    versions=(28,)),
    Constant('FL_WATCHED',          (31, 0x00000800), (57, 0x00000200),
                                    versions=(31,)),
    Constant('FL_PRESERVED',        (32, 0x00001000), (57, 0x00000400),
                                    versions=(32,)),
    Constant('FL_CHANCOMMFREE',     0x00000800, versions=(57,)),
    Constant('FL_REPEAT',           0x00001000, versions=(57,)),
    Constant('FL_DUPLICATE',        0x00002000, versions=(57,)),
    Constant('FL_REACTIVATE',       0x00004000, versions=(57,)),
    Constant('FL_IGNOREBOOKMARK',   0x00008000, versions=(57,)),
    Constant('FL_TYPEMASK',         0x000F0000, versions=(57,)),
    Constant('FL_INUSEOTHER',       0x00400000, versions=(57,))])

RecordingStatus = FieldSet('RecordingStatus', [
    Constant('OTHER_RECORDING',     -13, versions=(73,)),
    Constant('OTHER_TUNING',        -12, versions=(73,)),
    Constant('MISSED_FUTURE',       -11, versions=(65,)),
    Constant('TUNING',              -10, versions=(63,)),
    Constant('FAILED',               -9, versions=(31,)),
    Constant('TUNER_BUSY',          (0, 12), (19, -8)),
    Constant('LOW_DISKSPACE',       (0, 11), (19, -7)),
    Constant('CANCELLED',           (0, 6),  (19, -6)),
    Constant('DELETED',              -5, versions=(0, 19)),
    Constant('MISSED',               -5, versions=(19,)),
    Constant('STOPPED',              -4, versions=(0, 19)),
    Constant('ABORTED',              -4, versions=(19,)),
    Constant('RECORDED',             -3),
    Constant('RECORDING',            -2),
    Constant('WILL_RECORD',          -1),
    Constant('UNKNOWN',               0),
    Constant('MANUAL_OVERRIDE',       1, versions=(0, 7)),
    Constant('DONT_RECORD',           1, versions=(7,)),
    Constant('PREVIOUS_RECORDING',    2),
    Constant('CURRENT_RECORDING',     3),
    Constant('EARLIER_SHOWING',       4),
    Constant('TOO_MANY_RECORDINGS',   5),
    Constant('NOT_LISTED',          (17, 13), (19, 6), versions=(17,)),
    Constant('LOWER_REC_PRIORITY',    7, versions=(0, 4)),
    Constant('CONFLICT',              7, versions=(4,)),
    Constant('MANUAL_CONFLICT',       8, versions=(0, 4)),
    Constant('LATER_SHOWING',         8, versions=(4,)),
    Constant('AUTO_CONFLICT',         9, versions=(0, 4)),
    Constant('REPEAT',                9, versions=(12,)),
    Constant('OVERLAP',              10, versions=(0, 7)),
    Constant('INACTIVE',             10, versions=(15,)),
    Constant('NEVER_RECORD',         11, versions=(19,)),
    Constant('OFFLINE',              12, versions=(28,)),
    Constant('OTHER_SHOWING',        13, versions=(33,))])

RecordingType = FieldSet('RecordingType', [
    Constant('NOT_RECORDING',        0),
    Constant('SINGLE_RECORD',        1),
    Constant('DAILY_RECORD',         2, versions=(77,), dbversions=(1309,)),
    Constant('TIMESLOT_RECORD',      2, versions=(0, 77),
                                        dbversions=(0, 1309)),
    Constant('CHANNEL_RECORD',       3, versions=(0, 77),
                                        dbversions=(0, 1310)),
    Constant('ALL_RECORD',           4),
    Constant('WEEKSLOT_RECORD',      5, versions=(0, 77),
                                        dbversions=(0, 1309)),
    Constant('WEEKLY_RECORD',        5, versions=(77,), dbversions=(1309,)),
    Constant('FIND_ONE_RECORD',      6, versions=(2,)),
    Constant('OVERRIDE_RECORD',      7, versions=(7,)),
    Constant('DONT_RECORD',          8, versions=(7,)),
    Constant('FIND_DAILY_RECORD',    9, versions=(15, 77),
                                        dbversions=(1061, 1309)),
    Constant('FIND_WEEKLY_RECORD',  10, versions=(15, 77),
                                        dbversions=(1061, 1309)),
    Constant('TEMPLATE_RECORD',     11, versions=(74,), dbversions=(1302,))])

RecordingSearchType = FieldSet('RecordingSearchType', [
    Constant('NO_SEARCH',            0),
    Constant('POWER_SEARCH',         1),
    Constant('TITLE_SEARCH',         2),
    Constant('KEYWORD_SEARCH',       3),
    Constant('PEOPLE_SEARCH',        4),
    Constant('MANUAL_SEARCH',        5)])

DupInType = FieldSet('DupInType', [
    Constant('DUPS_IN_UNKNOWN',      0x00, versions=(3,)),
    Constant('DUPS_IN_RECORDED',     0x01, versions=(3,)),
    Constant('DUPS_IN_OLD_RECORDED', 0x02, versions=(3,)),
    Constant('DUPS_IN_BOTH',         0x03, versions=(14, 33)),
    Constant('DUPS_IN_ALL',          0x0F, versions=(3,)),
    Constant('DUPS_NEW_EPI',         (14, 0x04), (33, 0x10),
                                     versions=(14,)),
    Constant('DUPS_EX_REPEATS',      0x20, versions=(33,)),
    Constant('DUPS_EX_GENERIC',      0x40, versions=(33,)),
    Constant('DUPS_FIRST_NEW',       0x80, versions=(34,))])

DupMethodType = FieldSet('DupMethodType', [
    Constant('DUP_CHECK_UNKNOWN',        0x00, versions=(3,)),
    Constant('DUP_CHECK_NONE',           0x01, versions=(3,)),
    Constant('DUP_CHECK_SUB',            0x02, versions=(3,)),
    Constant('DUP_CHECK_DESC',           0x04, versions=(3,)),
    Constant('DUP_CHECK_SUB_DESC',       0x06, versions=(3,)),
    Constant('DUP_ALLOW_EMPTY',          0x10, versions=(3, 4)),
    Constant('DUP_EMPTY_SUB_DESC',       0x16, versions=(3, 4)),
    Constant('DUP_CHECK_ID_ONLY',        0x08, versions=(9, 10)),
    Constant('DUP_CHECK_NEW_EPI',        0x08, versions=(12, 14)),
    Constant('DUP_CHECK_SUB_THEN_DESC',  0x08, versions=(33,))])

AudioProperties = FieldSet('AudioProperties', [
    Constant('AUD_UNKNOWN',          0x00, versions=(35,)),
    Constant('AUD_STEREO',           0x01, versions=(35,)),
    Constant('AUD_MONO',             0x02, versions=(35,)),
    Constant('AUD_SURROUND',         0x04, versions=(35,)),
    Constant('AUD_DOLBY',            0x08, versions=(35,)),
    Constant('AUD_HARDHEAR',         0x10, versions=(37,)),
    Constant('AUD_VISUALIMPAIR',     0x20, versions=(37,))])

VideoProperties = FieldSet('VideoProperties', [
    Constant('VID_UNKNOWN',          0x00, versions=(35,)),
    Constant('VID_HDTV',             0x01, versions=(35,)),
    Constant('VID_WIDESCREEN',       0x02, versions=(35,)),
    Constant('VID_AVC',              0x04, versions=(37,)),
    Constant('VID_720',              0x08, versions=(45,)),
    Constant('VID_1080',             0x10, versions=(45,)),
    Constant('VID_DAMAGED',          0x20, versions=(70,))])

SubtitleType = FieldSet('SubtitleType', [
    Constant('SUB_UNKNOWN',          0x00, versions=(35,)),
    Constant('SUB_HARDHEAR',         0x01, versions=(35,)),
    Constant('SUB_NORMAL',           0x02, versions=(35,)),
    Constant('SUB_ONSCREEN',         0x04, versions=(35,)),
    Constant('SUB_SIGNED',           0x08, versions=(37,))])

CategoryType = FieldSet('CategoryType', [
    Constant('NONE',                 0, dbversions=(1244,)),
    Constant('MOVIE',                1, dbversions=(1244,)),
    Constant('SERIES',               2, dbversions=(1244,)),
    Constant('SPORTS',               3, dbversions=(1244,)),
    Constant('TVSHOW',               4, dbversions=(1244,))])

#### responses ####

ProgramInfo = FieldSet('ProgramInfo', [
    Field('TITLE'),
    Field('SUBTITLE'),
    Field('DESCRIPTION'),
    Field('SEASON',             I, versions=(67,), default='0'),
    Field('EPISODE',            I, versions=(67,), default='0'),
    Field('TOTALEPISODES',      I, versions=(78,), default='0'),
    Field('SYNDICATED_EPISODE', S, versions=(76,), default='0'),
    Field('CATEGORY'),
    Field('CHANNEL_ID',         I),
    Field('CHANNEL_NUMBER'),
    Field('CHANNEL_SIGN'),
    Field('CHANNEL_NAME'),
    Field('PATH_NAME'),
    Field('FILESIZE_HIGH',      L, versions=(0, 57)),
    Field('FILESIZE_LOW',       L, versions=(0, 57)),
    Field('FILESIZE',           L, versions=(57,)),
    Field('START_DATE_TIME',    D),
    Field('END_DATE_TIME',      D),
    Field('DUPLICATE',          B, versions=(0, 57)),
    Field('SHAREABLE',          B, versions=(0, 57)),
    Field('FIND_ID',            I, default='0'),
    Field('HOSTNAME'),
    Field('SOURCE_ID',          I),
    Field('CARD_ID',            I),
    Field('INPUT_ID',           I),
    Field('REC_PRIORITY',       I),
    Field('REC_STATUS',         E, group='RecordingStatus'),
    Field('REC_ID',             I),
    Field('REC_TYPE',           E, group='RecordingType'),
    Field('REC_DUPS',           I, versions=(0, 3)),
    Field('DUP_IN',             G, versions=(3,), group='DupInType'),
    Field('DUP_METHOD',         G, versions=(3,), group='DupMethodType'),
    Field('REC_START_TIME',     D),
    Field('REC_END_TIME',       D),
    Field('REPEAT',             B, versions=(0, 57)),
    Field('PROGRAM_FLAGS',      G, group='ProgramFlags'),
    Field('REC_GROUP',          S, versions=(3,),
                                   default=RECORDING_GROUP_DEFAULT),
    Field('CHAN_COMM_FREE',     B, versions=(3, 57)),
    Field('CHANNEL_OUTPUT_FILTERS', versions=(6,)),
    Field('SERIES_ID',          S, versions=(8,)),
    Field('PROGRAM_ID',         S, versions=(8,)),
    Field('INETREF',            S, versions=(67,)),
    Field('LAST_MODIFIED',      D, versions=(11,)),
    Field('STARS',              F, versions=(12,), default='0.0'),
    Field('ORIGINAL_AIRDATE',   RAWTYPE.DAY, versions=(12,)),
    Field('HAS_AIRDATE',        B, versions=(15, 57)),
    Field('TIMESTRETCH',        F, versions=(18, 23)),
    Field('PLAY_GROUP',         S, versions=(23,),
                                   default=PLAY_GROUP_DEFAULT),
    Field('REC_PRIORITY2',      I, versions=(25,)),
    Field('PARENT_ID',          I, versions=(31,)),
    Field('STORAGE_GROUP',      S, versions=(32,),
                                   default=STORAGE_GROUP_DEFAULT),
    Field('AUDIO_PROPERTIES',   G, versions=(35,), group='AudioProperties'),
    Field('VIDEO_PROPERTIES',   G, versions=(35,), group='VideoProperties'),
    Field('SUBTITLE_TYPE',      G, versions=(35,), group='SubtitleType'),
    Field('YEAR',               I, versions=(41,)),
    Field('PART_NUMBER',        I, versions=(76,)),
    Field('PART_TOTAL',         I, versions=(76,)),
    Field('CATEGORYTYPES',      E, versions=(79,), group='CategoryType'),
    Field('RECORDEDID',         I, versions=(82,)),
    Field('INPUTNAME',          S, versions=(86,)),
    Field('BOOKMARKUPDATE',     D, versions=(86,))])

FreeSpaceInfo = FieldSet('FreeSpace', [
    Field('HOSTNAME'),
    Field('DIRECTORIES',        S, versions=(32,)),
    Field('IS_LOCAL',           B, versions=(32,)),
    Field('FILESYSTEM_ID',      S, versions=(32,)),
    Field('STORAGE_GROUP_ID',   I, versions=(37,)),
    Field('BLOCK_SIZE',         I, versions=(47,)),
    Field('TOTAL_SPACE1',       L, versions=(0, 66)),
    Field('TOTAL_SPACE2',       L, versions=(0, 66)),
    Field('TOTAL_SPACE',        L, versions=(66,)),
    Field('USED_SPACE1',        L, versions=(0, 66)),
    Field('USED_SPACE2',        L, versions=(0, 66)),
    Field('USED_SPACE',         L, versions=(66,))])

@records.record('FreeSpace')
class FreeSpace( PropertyAwareRecord ):
    """Represents a FreeSpace entry, sizes given in kilobytes."""
    _fieldset = 'FreeSpace'

    def __repr__(self):
        return "<FreeSpace '%s@%s' at %s>"\
                    % (self.directories, self.hostname, hex(id(self)))

    def _combined(self, name):
        if self.has(name):
            return self.get(name)
        high, low = self.getRaw(name+'1'), self.getRaw(name+'2')
        if high is None or low is None:
            return None
        return Codec.decodeLong(high, low)

    @property
    def totalspace(self):
        return self._combined('TOTAL_SPACE')

    @property
    def usedspace(self):
        return self._combined('USED_SPACE')

    @property
    def freespace(self):
        total, used = self.totalspace, self.usedspace
        if total is None or used is None:
            return None
        return total - used

@records.record('ProgramInfo')
class Program( PropertyAwareRecord ):
    """Represents a program with all detail returned by the backend."""
    _fieldset = 'ProgramInfo'

    _xmlattrs = (('title',          'TITLE'),
                 ('subTitle',       'SUBTITLE'),
                 ('category',       'CATEGORY'),
                 ('seriesId',       'SERIES_ID'),
                 ('programId',      'PROGRAM_ID'),
                 ('inetref',        'INETREF'),
                 ('hostname',       'HOSTNAME'),
                 ('fileSize',       'FILESIZE'),
                 ('programFlags',   'PROGRAM_FLAGS'),
                 ('stars',          'STARS'),
                 ('airdate',        'ORIGINAL_AIRDATE'),
                 ('season',         'SEASON'),
                 ('episode',        'EPISODE'),
                 ('chanId',         'CHANNEL_ID'),
                 ('chanNum',        'CHANNEL_NUMBER'),
                 ('callSign',       'CHANNEL_SIGN'),
                 ('channelName',    'CHANNEL_NAME'),
                 ('recordId',       'REC_ID'),
                 ('recType',        'REC_TYPE'),
                 ('recStatus',      'REC_STATUS'),
                 ('status',         'REC_STATUS'),
                 ('recPriority',    'REC_PRIORITY'),
                 ('dupInType',      'DUP_IN'),
                 ('dupMethod',      'DUP_METHOD'),
                 ('recGroup',       'REC_GROUP'),
                 ('playGroup',      'PLAY_GROUP'),
                 ('storageGroup',   'STORAGE_GROUP'))
    _xmldates = (('startTime',      'START_DATE_TIME'),
                 ('endTime',        'END_DATE_TIME'),
                 ('lastModified',   'LAST_MODIFIED'),
                 ('recStartTs',     'REC_START_TIME'),
                 ('recEndTs',       'REC_END_TIME'))

    def __repr__(self):
        start = self.start_date_time
        return "<Program '%s','%s' at %s>" % (self.title,
                 start.isoformat(' ') if start else None, hex(id(self)))

    @classmethod
    def fromEtree(cls, etree, version=PROTO_VERSION, **kwargs):
        """
        Program.fromEtree(etree, version=PROTO_VERSION) -> Program object

        Builds a program from a <Program> element, as listed by the
            backend's XML services.
        """
        xmldat = dict(etree.attrib)
        for child in ('Channel', 'Recording'):
            if etree.find(child) is not None:
                xmldat.update(etree.find(child).attrib)

        prog = cls(version, **kwargs)
        if etree.text and etree.text.strip():
            prog.setRaw('DESCRIPTION', etree.text.strip())
        for key, field in cls._xmlattrs:
            if key in xmldat:
                prog.setRaw(field, xmldat[key])
        for key, field in cls._xmldates:
            if xmldat.get(key):
                prog.set(field, datetime.fromIso(xmldat[key]))
        return prog

    @property
    def filesize(self):
        if self.has('FILESIZE'):
            return self.get('FILESIZE')
        high, low = self.getRaw('FILESIZE_HIGH'), self.getRaw('FILESIZE_LOW')
        if high is None or low is None:
            return None
        return Codec.decodeLong(high, low)

    @filesize.setter
    def filesize(self, value):
        if self.has('FILESIZE'):
            self.set('FILESIZE', value)
        else:
            high, low = Codec.encodeLong(value)
            self.setRaw('FILESIZE_HIGH', high)
            self.setRaw('FILESIZE_LOW', low)

    def isRecording(self):
        status = self.get('REC_STATUS')
        return (status is not None) and status.hasEnum('RECORDING')

    def hasFlag(self, flag):
        flags = self.get('PROGRAM_FLAGS')
        return (flags is not None) and flags.isSet(flag)
