# -*- coding: utf-8 -*-
"""Provides managed logging."""

from MythAPI.static import LOGLEVEL, LOGMASK, LOGFACILITY
from MythAPI.exceptions import MythError

import os
import syslog
import codecs

from sys import stdout, argv
from datetime import datetime
from threading import Lock
from io import StringIO
from traceback import format_exc

def _donothing(*args, **kwargs):
    pass

class DummyLogger( LOGLEVEL, LOGMASK, LOGFACILITY ):
    def __init__(self, module=None, db=None): pass
    def logTB(self, mask): pass
    def log(self, mask, level, message, detail=None): pass
    def __call__(self, mask, level, message, detail=None): pass

class MythLog( LOGLEVEL, LOGMASK, LOGFACILITY ):
    """
    MythLog(module='pythonbindings', db=None) -> logging object

    'module' defines the source of the message in the logs
    'db' optionally attaches a database, messages are then also
        written to its 'logging' table

    The filter level and mask are global values, shared between all
    logging instances.  The default filter is 'general' at level 'info'.
    The logging object is callable, and implements the MythLog.log() method.
    """

    _bwlist = ( 'general','record','playback','channel','osd','file',
                'schedule','network','commflag','audio','libav','jobqueue',
                'siparser','eit','vbi','database','dsmcc','mheg','upnp',
                'socket','xmltv','dvbcam','media','idle','channelscan',
                'extra','timestamp')

    @classmethod
    def _initlogger(cls):
        cls._initlogger = classmethod(_donothing)
        cls._MASK = LOGMASK.GENERAL
        cls._LEVEL = LOGLEVEL.INFO
        cls._LOGFILE = stdout
        cls._logwrite = cls._logfile
        cls._QUIET = 0
        cls._DBLOG = True
        cls._SYSLOG = None
        cls._lock = Lock()
        cls._parseinput()

    @classmethod
    def _parseinput(cls):
        args = iter(argv)
        next(args, None)
        try:
            while True:
                arg = next(args)
                if arg == '--quiet':
                    cls._QUIET += 1
                elif arg == '--nodblog':
                    cls._DBLOG = False
                elif arg == '--loglevel':
                    cls._setlevel(next(args))
                elif arg == '--verbose':
                    cls._setmask(next(args))
                elif arg == '--logfile':
                    cls._setfile(next(args))
                elif arg == '--logpath':
                    cls._setpath(next(args))
                elif arg == '--syslog':
                    cls._setsyslog(next(args))
                elif arg == '--':
                    break

        except StopIteration:
            pass

    @classmethod
    def _argparseinput(cls):
        opts, _ = cls._parser.parse_known_args()
        if opts.quiet:
            cls._QUIET = opts.quiet
        if opts.dblog:
            cls._DBLOG = False
        if opts.loglevel:
            cls._setlevel(opts.loglevel)
        if opts.verbose:
            cls._setmask(opts.verbose)
        if opts.logfile:
            cls._setfile(opts.logfile)
        if opts.logpath:
            cls._setpath(opts.logpath)
        if opts.syslog:
            cls._setsyslog(opts.syslog)

    @classmethod
    def loadArgParse(cls, parser):
        cls._parser = parser
        cls._parseinput = cls._argparseinput
        parser.add_argument('--quiet', action="count", dest="quiet",
            help="Run quiet. One use squelches terminal, two stops all logging.")
        parser.add_argument('--nodblog', action="store_true", dest="dblog",
            help="Prevent logging to the database.")
        parser.add_argument('--loglevel', action="store", dest="loglevel",
            help="Specify log verbosity, using standard syslog levels.")
        parser.add_argument('--verbose', action="store", dest="verbose",
            help="Specify log mask, deciding what areas are allowed to log.")
        parser.add_argument('--logfile', action="store", dest="logfile",
            help="Specify file to log all output to.")
        parser.add_argument('--logpath', action="store", dest="logpath",
            help="Specify directory to log to, filename will be automatically decided.")
        parser.add_argument('--syslog', action="store", dest="syslog",
            help="Specify syslog facility to log to.")

    def __repr__(self):
        return "<%s '%s','%s' at %s>" % \
                (self.__class__.__name__, self.module,
                 bin(self._MASK), hex(id(self)))

    def __new__(cls, *args, **kwargs):
        # abuse the __new__ constructor to set some immutable class attributes
        # before the class is instantiated
        cls._initlogger()
        return super(MythLog, cls).__new__(cls)

    def __init__(self, module='pythonbindings', db=None):
        self.module = module
        self.db = db

    @classmethod
    def _setlevel(cls, level):
        cls._initlogger()
        try:
            cls._LEVEL = int(level)
        except ValueError:
            if level not in ('any', 'emerg', 'alert', 'crit', 'err',
                             'warning', 'info', 'notice', 'debug', 'unknown'):
                return
            cls._LEVEL = getattr(cls, level.upper())

    @classmethod
    def _setmask(cls, mask):
        """Manually set loglevel."""
        cls._initlogger()
        try:
            cls._MASK = int(mask)
        except ValueError:
            cls._MASK = cls._parsemask(mask)

    @classmethod
    def _setfile(cls, filename):
        """Redirect log output to a specific file."""
        cls._initlogger()
        cls._setfileobject(codecs.open(filename, 'w', encoding='utf-8'))

    @classmethod
    def _setpath(cls, filepath):
        cls._initlogger()
        cls._setfile(os.path.join(filepath, "{0}.{1}.{2}.log"\
                            .format(argv[0].split('/')[-1],
                                    datetime.now().strftime('%Y%m%d%H%M%S'),
                                    os.getpid())))

    @classmethod
    def _setfileobject(cls, fileobject, close=True):
        """Redirect log output to an opened file pointer."""
        cls._initlogger()
        if close and cls._LOGFILE not in (None, stdout):
            cls._LOGFILE.close()
        cls._LOGFILE = fileobject
        cls._logwrite = cls._logfile
        if cls._SYSLOG:
            cls._SYSLOG = None
            syslog.closelog()

    @classmethod
    def _setsyslog(cls, facility=LOGFACILITY.USER):
        cls._initlogger()
        try:
            facility = int(facility)
            for fac in dir(LOGFACILITY):
                if '_' in fac:
                    continue
                if getattr(LOGFACILITY, fac) == facility:
                    facility = 'LOG_'+fac
                    break
            else:
                raise MythError("Invalid syslog facility")

        except ValueError:
            if not facility.startswith('LOG_'):
                facility = 'LOG_'+facility.upper()
            if not hasattr(LOGFACILITY, facility[4:]):
                raise MythError("Invalid syslog facility")

        cls._SYSLOG = facility
        syslog.openlog(argv[0].rsplit('/', 1)[-1],
                       syslog.LOG_NDELAY|syslog.LOG_PID,
                       getattr(syslog, facility))
        cls._logwrite = cls._logsyslog
        if cls._LOGFILE not in (None, stdout):
            cls._LOGFILE.close()
        cls._LOGFILE = None

    @classmethod
    def _parsemask(cls, mstr=None):
        if mstr:
            mask = cls.NONE
            for m in mstr.split(','):
                if m in ('all','most','none'):
                    # set initial bitfield
                    mask = getattr(cls, m.upper())
                elif m in cls._bwlist:
                    # update bitfield OR
                    mask |= getattr(cls, m.upper())
                elif m[:2] == 'no' and m[2:] in cls._bwlist:
                    # update bitfield NOT
                    mask &= mask^getattr(cls, m[2:].upper())
            return mask
        else:
            cls._initlogger()
            return ','.join([m for m in cls._bwlist
                                if cls._MASK&getattr(cls, m.upper())])

    def time(self): return datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')

    def logTB(self, mask):
        """
        MythLog.logTB(mask) -> None

        'mask' sets the bitwise log mask, to be matched against the log
                    filter. If any bits match true, the message will be logged.
            This will log the latest traceback.
        """
        self.log(mask, self.CRIT, format_exc())

    def log(self, mask, level, message, detail=None):
        """
        MythLog.log(mask, level, message, detail=None) -> None

        'mask' sets the bitwise log mask, to be matched against the log
                    filter. If any bits match true, the message will be logged.
        'message' and 'detail' set the log message content using the format:
                <timestamp> <module>: <message>
                        ---- or ----
                <timestamp> <module>: <message> -- <detail>
        """
        if level > self._LEVEL:
            return
        if not mask&self._MASK:
            return
        if self._QUIET > 1:
            return

        with self._lock:
            self._logwrite(mask, level, message, detail)
        self._logdatabase(mask, level, message, detail)

    def _logfile(self, mask, level, message, detail):
        if self._QUIET and (self._LOGFILE == stdout):
            return

        buff = StringIO()
        buff.write("{0} {3} [{1}] {2} "\
            .format(self.time(), os.getpid(), self.module,
                    ['!','A','C','E','W','N','I','D'][level]))

        multiline = False
        if '\n' in message:
            multiline = True
        elif detail:
            if '\n' in detail:
                multiline = True

        if multiline:
            for line in message.split('\n'):
                buff.write('\n    %s' % line)
            if detail:
                for line in detail.split('\n'):
                    buff.write('\n        %s' % line)
        else:
            buff.write(message)
            if detail:
                buff.write(' -- %s' % detail)

        buff.write('\n')

        self._LOGFILE.write(buff.getvalue())
        self._LOGFILE.flush()

    def _logsyslog(self, mask, level, message, detail):
        syslog.syslog(level,
                      message + (' -- {0}'.format(detail) if detail else ''))

    def _logdatabase(self, mask, level, message, detail):
        if self.db and self._DBLOG:
            with self.db.cursor(DummyLogger()) as cursor:
                application = argv[0]
                if '/' in application:
                    application = application.rsplit('/', 1)[1]

                cursor.execute("""INSERT INTO logging
                                    (host, application, pid, thread,
                                     msgtime, level, message)
                                  VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (self.db.gethostname(), application,
                     os.getpid(), self.module, self.time(), level,
                     message + (' -- {0}'.format(detail) if detail else '')))

    def __call__(self, mask, level, message, detail=None):
        self.log(mask, level, message, detail)
