# -*- coding: utf-8 -*-

"""
Contains any static and global variables for the MythAPI protocol client
"""

from sys import maxsize

OWN_VERSION = (0,1,0)
PROTO_VERSION = 88
PROTO_TOKEN = 'XmasGift'
SCHEMA_VERSION = 1344
BACKEND_SEP = '[]:[]'

# sorts after every real protocol or schema version
LATEST = maxsize

# first versions speaking UTC instead of backend local time
UTC_PROTO_VERSION = 75
UTC_SCHEMA_VERSION = 1302

# protocol versions before 62 were negotiated without a token
PROTO_TOKENS = {
    62: '78B5631E',         63: '3875641D',         64: '8675309J',
    65: 'D2BB94C2',         66: '0C0FFEE0',         67: '0G0G0G0',
    68: '90094EAD',         69: '63835135',         70: '53153836',
    71: '05e82186',         72: 'D78EFD6F',         73: 'D7FE8D6F',
    74: 'SingingPotato',    75: 'SweetRock',        76: 'FireWilde',
    77: 'WindMark',         78: 'IceBurns',         79: 'BasaltGiant',
    80: 'TaDah!',           81: 'MultiRecDos',      82: 'IdIdO',
    83: 'BreakingGlass',    84: 'CanaryCoalmine',   85: 'BluePool',
    86: '(ノಠ益ಠ)ノ彡┻━┻ ',
    87: '(ノಠ益ಠ)ノ彡┻━┻ '
        '(No entiendo!)',
    88: 'XmasGift'}

DB_VERSIONS = ( 1029, 1037, 1042, 1047, 1056, 1057, 1061, 1062, 1072,
                1074, 1082, 1085, 1088, 1108, 1143, 1158, 1170, 1171,
                1182, 1193, 1244, 1257, 1277, 1278, 1302, 1309, 1310,
                1344)

RECORDING_GROUP_DEFAULT = 'Default'
PLAY_GROUP_DEFAULT = 'Default'
STORAGE_GROUP_DEFAULT = 'Default'
RECORDING_PROFILE_DEFAULT = 'Default'

class RAWTYPE( object ):
    STRING      = 0
    INTEGER     = 1
    LONG        = 2
    BOOLEAN     = 3
    FLOAT       = 4
    DATE        = 5
    DAY         = 6
    TIME        = 7
    ENUMGROUP   = 8
    FLAGGROUP   = 9

    _names = ['String', 'Integer', 'Long', 'Boolean', 'Float', 'Date',
              'Day', 'Time', 'EnumGroup', 'FlagGroup']

class SPACE( object ):
    PROTO       = 'proto'
    DB          = 'db'

class LOGMASK( object ):
    ALL         = 0b111111111111111111111111111
    MOST        = 0b011111111110111111111111111
    NONE        = 0b000000000000000000000000000

    GENERAL     = 0b000000000000000000000000001
    RECORD      = 0b000000000000000000000000010
    PLAYBACK    = 0b000000000000000000000000100
    CHANNEL     = 0b000000000000000000000001000
    OSD         = 0b000000000000000000000010000
    FILE        = 0b000000000000000000000100000
    SCHEDULE    = 0b000000000000000000001000000
    NETWORK     = 0b000000000000000000010000000
    COMMFLAG    = 0b000000000000000000100000000
    AUDIO       = 0b000000000000000001000000000
    LIBAV       = 0b000000000000000010000000000
    JOBQUEUE    = 0b000000000000000100000000000
    SIPARSER    = 0b000000000000001000000000000
    EIT         = 0b000000000000010000000000000
    VBI         = 0b000000000000100000000000000
    DATABASE    = 0b000000000001000000000000000
    DSMCC       = 0b000000000010000000000000000
    MHEG        = 0b000000000100000000000000000
    UPNP        = 0b000000001000000000000000000
    SOCKET      = 0b000000010000000000000000000
    XMLTV       = 0b000000100000000000000000000
    DVBCAM      = 0b000001000000000000000000000
    MEDIA       = 0b000010000000000000000000000
    IDLE        = 0b000100000000000000000000000
    CHANNELSCAN = 0b001000000000000000000000000
    EXTRA       = 0b010000000000000000000000000
    TIMESTAMP   = 0b100000000000000000000000000

class LOGLEVEL( object ):
    ANY         = -1
    EMERG       = 0
    ALERT       = 1
    CRIT        = 2
    ERR         = 3
    WARNING     = 4
    NOTICE      = 5
    INFO        = 6
    DEBUG       = 7
    UNKNOWN     = 8

class LOGFACILITY( object ):
    KERN        = 1
    USER        = 2
    MAIL        = 3
    DAEMON      = 4
    AUTH        = 5
    LPR         = 6
    NEWS        = 7
    UUCP        = 8
    CRON        = 9
    LOCAL0      = 10
    LOCAL1      = 11
    LOCAL2      = 12
    LOCAL3      = 13
    LOCAL4      = 14
    LOCAL5      = 15
    LOCAL6      = 16
    LOCAL7      = 17

class ERRCODES( object ):
    GENERIC             = 0
    SOCKET              = 2
    DB_RAW              = 50
    DB_CONNECTION       = 51
    DB_CREDENTIALS      = 52
    DB_SETTING          = 53
    PROTO_CONNECTION    = 100
    PROTO_ANNOUNCE      = 101
    PROTO_MISMATCH      = 102
    CONFIG_RANGE        = 250
    CONFIG_DUPLICATE    = 251
    CONFIG_VALUE        = 252
    CONFIG_UNKNOWN      = 253
    DECODE_FIELDCOUNT   = 300
    DECODE_VALUE        = 301
    ENCODE_VALUE        = 302
    DATA_UNSUPPORTED    = 350
