# -*- coding: utf-8 -*-

"""
Provides base classes for accessing MythTV
"""

from MythAPI.static import PROTO_VERSION, UTC_PROTO_VERSION, \
                           UTC_SCHEMA_VERSION, BACKEND_SEP
from MythAPI.exceptions import MythDecodeError, MythBEError
from MythAPI.logging import MythLog
from MythAPI.connections import BEConnection
from MythAPI.database import DBCache
from MythAPI.factory import records
from MythAPI.dataheap import MythFillDatabaseStatus, MythShutdownStatus
from MythAPI.utility import datetime

__all__ = ['MythBE', 'MythDB']

class MythBE( BEConnection ):
    """
    MythBE(backend, port, version=PROTO_VERSION, localname=None,
           timeout=10.0, factory=None) -> backend object

    A monitor connection to the backend, returning the records of its
        responses decoded at the negotiated protocol version.

    Available methods:
        getRecordings()           - returns a list of all recordings
        getRecording()            - returns a single recording
        getFreeSpaceList()        - returns a list of FreeSpace objects
    """
    logmodule = 'Python Backend Connection'

    def __init__(self, backend, port, version=PROTO_VERSION, localname=None,
                       timeout=10.0, factory=None):
        self.factory = factory if factory is not None else records
        super(MythBE, self).__init__(backend, port, version, localname,
                                     timeout)

    def _split(self, key, tokens, count=None):
        """
        Splits a response into consecutive records of 'key', each sized
            for the negotiated version.
        """
        size = self.factory.catalog.count(key, self.version)
        if count is None:
            count = len(tokens)//size if size else 0
        if len(tokens) != count*size:
            self.log(MythLog.GENERAL, MythLog.ERR,
                     "Malformed '%s' list" % key,
                     '%d tokens for %d records of %d' % \
                            (len(tokens), count, size))
            raise MythDecodeError(MythDecodeError.DECODE_FIELDCOUNT,
                                  key, count*size, len(tokens))
        return [self.factory.fromPacket(key, self.version,
                                        tokens[i*size:(i+1)*size]) \
                        for i in range(count)]

    def _response(self, command):
        """
        Sends 'command', returning the response tokens.  A missing
            response raises MythBEError.
        """
        res = self.backendCommand(command)
        if res == '':
            self.log(MythLog.GENERAL, MythLog.ERR,
                     "No response to '%s'" % command,
                     '[%s]:%d' % (self.host, self.port))
            raise MythBEError("No response to '%s' from backend [%s]:%d" \
                                % (command, self.host, self.port))
        return res.split(BACKEND_SEP)

    def getRecordings(self):
        """
        Returns a list of all Program objects which have already recorded
        """
        res = self._response('QUERY_RECORDINGS Play')
        try:
            count = int(res[0])
        except ValueError:
            raise MythBEError("Invalid recording count '%s' from backend" \
                                % res[0])
        return self._split('ProgramInfo', res[1:], count)

    def getRecording(self, chanid, starttime):
        """
        obj.getRecording(chanid, starttime) -> Program object or None

        Returns the recording on channel 'chanid' starting at 'starttime'.
        """
        starttime = datetime.duck(starttime)
        if self.version >= UTC_PROTO_VERSION:
            starttime = starttime.mythformat()
        else:
            starttime = starttime.astimezone(datetime.localTZ())\
                                 .strftime('%Y%m%d%H%M%S')
        res = self._response('QUERY_RECORDING TIMESLOT %d %s' \
                                % (int(chanid), starttime))
        if res[0] == 'ERROR':
            return None
        return self.factory.fromPacket('ProgramInfo', self.version, res[1:])

    def getFreeSpaceList(self):
        """
        Returns a list of FreeSpace objects, one per storage directory
        """
        res = self._response('QUERY_FREE_SPACE_LIST')
        return self._split('FreeSpace', res)

class MythDB( DBCache ):
    __doc__ = DBCache.__doc__+"""
        obj.getSchedules()      - return a list of recording rules
        obj.getJobs()           - return a list of queued jobs
        obj.getSettings()       - return a list of settings
        obj.getMythFillStatus() - return the guide grabber settings
        obj.getMythShutdownStatus() - return the idle shutdown settings
    """

    def __init__(self, db=None, args=None, factory=None, **dbconn):
        self.factory = factory if factory is not None else records
        super(MythDB, self).__init__(db, args, **dbconn)

    def getSchedules(self, chanid=None):
        """
        obj.getSchedules(chanid=None) -> list of Schedule objects
        """
        if chanid is None:
            return list(self.getRows('record', factory=self.factory))
        return list(self.getRows('record', 'chanid=?', (chanid,),
                                 factory=self.factory))

    def getJobs(self, chanid=None, starttime=None):
        """
        obj.getJobs(chanid=None, starttime=None) -> list of Job objects

        'chanid' and 'starttime' filter the jobs of a single recording.
        """
        where = []
        args = []
        if chanid is not None:
            where.append('chanid=?')
            args.append(chanid)
        if starttime is not None:
            starttime = datetime.duck(starttime)
            if self.schemaVersion >= UTC_SCHEMA_VERSION:
                starttime = starttime.sqlformat(datetime.UTCTZ())
            else:
                starttime = starttime.sqlformat()
            where.append('starttime=?')
            args.append(starttime)
        return list(self.getRows('jobqueue', ' AND '.join(where) or None,
                                 args, factory=self.factory))

    def getSettings(self, hostname=None, *names):
        """
        obj.getSettings(hostname=None, *names) -> list of Setting objects

        'hostname' None selects the global settings, and '*' those of
            every host.  'names' limits the result to the named settings.
        """
        where = []
        args = []
        if names:
            where.append('(%s)' % ' OR '.join('value=?' for n in names))
            args.extend(names)
        if hostname is None:
            where.append('hostname IS NULL')
        elif hostname != '*':
            where.append('hostname=?')
            args.append(hostname)
        return list(self.getRows('settings', ' AND '.join(where) or None,
                                 args, factory=self.factory))

    def getSettingsGroup(self, cls, hostname='*'):
        """
        obj.getSettingsGroup(cls, hostname='*') -> settings group

        Reads the settings named by the SettingsGroup class 'cls'.
        """
        names = cls.settingNames(self.schemaVersion, self.factory.catalog)
        settings = dict((s.getRaw('VALUE'), s.getRaw('DATA')) \
                            for s in self.getSettings(hostname, *names))
        return cls.fromSettings(settings, self.schemaVersion,
                                catalog=self.factory.catalog,
                                factory=self.factory)

    def getMythFillStatus(self):
        return self.getSettingsGroup(MythFillDatabaseStatus)

    def getMythShutdownStatus(self):
        return self.getSettingsGroup(MythShutdownStatus)
