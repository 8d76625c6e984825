
__all_exceptions__  = ['MythError', 'MythConfigError', 'MythDecodeError', \
                       'MythDataError', 'MythDBError', 'MythBEError']

__all_engine__      = ['VersionRange', 'VersionedValue', 'FieldCatalog', \
                       'FieldDescriptor', 'FieldSet', 'Field', 'Constant', \
                       'Codec', 'PropertyAwareRecord', 'FlagGroup', \
                       'EnumGroup', 'RecordFactory', 'records']

__all_proto__       = ['FreeSpace', 'Program', 'ProgramFlags', \
                       'RecordingStatus', 'RecordingType', \
                       'RecordingSearchType', 'DupInType', 'DupMethodType', \
                       'AudioProperties', 'VideoProperties', 'SubtitleType', \
                       'CategoryType']

__all_data__        = ['Schedule', 'Job', 'JobType', 'JobStatus', \
                       'JobCommands']

__all_method__      = ['MythBE', 'MythDB', 'DBCache', 'DatabaseConfig', \
                       'BEConnection']

__all__             = ['static', 'MythLog', 'datetime']\
                        +__all_exceptions__\
                        +__all_engine__\
                        +__all_proto__\
                        +__all_data__\
                        +__all_method__

from . import static
from .static import OWN_VERSION
from .exceptions import MythError, MythConfigError, MythDecodeError, \
                        MythDataError, MythDBError, MythBEError
from .logging import MythLog
from .utility import datetime
from .versions import VersionRange, VersionedValue
from .fields import FieldCatalog, FieldDescriptor, FieldSet, Field, Constant
from .codec import Codec
from .groups import FlagGroup, EnumGroup
from .record import PropertyAwareRecord
from .factory import RecordFactory, records
from .mythproto import *
from .dataheap import *
from .connections import BEConnection, dbmodule
from .database import DBCache, DatabaseConfig
from .methodheap import *

__version__ = OWN_VERSION
static.dbmodule = dbmodule.__version__
