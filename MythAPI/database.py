# -*- coding: utf-8 -*-

"""
Provides the database configuration and connection cache, reading
table rows into records.
"""

from MythAPI.static import LATEST
from MythAPI.logging import MythLog
from MythAPI.utility import QuickProperty
from MythAPI.exceptions import MythError, MythDBError
from MythAPI.connections import DBConnection, LoggedCursor
from MythAPI.factory import records

from socket import gethostname
from lxml import etree
import datetime as _pydt
import weakref
import os

class DatabaseConfig( object ):
    """
    DatabaseConfig(args, **kwargs) -> database credentials

    Holds the login credentials of the database.  'args' and 'kwargs'
        accept the keys LocalHostName, DBHostName, DBUserName,
        DBPassword, DBName and DBPort.
    """
    _conf_trans = {'PingHost':'pinghost', 'Host':'hostname',
                   'UserName':'username', 'Password':'password',
                   'DatabaseName':'database', 'Port':'port'}

    pinghost =  QuickProperty('_pinghost', False, bool)
    port =      QuickProperty('_port', 3306, int)
    hostname =  QuickProperty('_hostname', '127.0.0.1')
    username =  QuickProperty('_username', 'mythtv')
    password =  QuickProperty('_password', 'mythtv')
    database =  QuickProperty('_database', 'mythconverg')

    @QuickProperty('_profile', gethostname())
    def profile(value):
        if value == 'my-unique-identifier-goes-here':
            raise ValueError(value)
        return value

    @property
    def ident(self):
        return "sql://{0.database}@{0.hostname}:{0.port}/".format(self)

    def __init__(self, args=(), **kwargs):
        self._default = True
        self.confdir = None

        kwargs.update(args)
        if len(kwargs):
            self._default = False

        for key,attr in (('LocalHostName', 'profile'),
                         ('DBHostName', 'hostname'),
                         ('DBUserName', 'username'),
                         ('DBPassword', 'password'),
                         ('DBName', 'database'),
                         ('DBPort', 'port')):
            if key in kwargs:
                setattr(self, attr, kwargs[key])

    def __repr__(self):
        return "<%s '%s' at %s>" % (self.__class__.__name__, self.ident,
                                    hex(id(self)))

    def __hash__(self):
        return hash((self.ident, self.username))

    def __eq__(self, other):
        if not isinstance(other, DatabaseConfig):
            return NotImplemented
        return (self.ident, self.username, self.password) == \
                    (other.ident, other.username, other.password)

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    def copy(self):
        cls = self.__class__
        obj = cls(())
        for attr in ('pinghost', 'port', 'hostname', 'username',
                     'password', 'database', 'profile'):
            if not getattr(cls, attr).isDefault(self):
                setattr(obj, attr, getattr(self, attr))
        return obj

    def test(self, log):
        """
        Yields the candidate credentials, in order: those given by the
            user, those read from $MYTHCONFDIR and ~/.mythtv, and the
            defaults if nothing was given.
        """
        # try using user-specified values
        if not self._default:
            log(log.GENERAL, log.DEBUG,
                            "Trying user-specified database credentials.")
            yield self

        # try reading config files
        confdirs = []
        confdir = os.environ.get('MYTHCONFDIR', '')
        if confdir and (confdir != '/'):
            confdirs.append(confdir)
        homedir = os.environ.get('HOME', '')
        if homedir and (homedir != '/'):
            confdirs.append(os.path.join(homedir, '.mythtv'))

        for confdir in confdirs:
            obj = self.copy()
            obj.confdir = confdir
            filename = os.path.join(confdir, 'config.xml')
            if obj.readXML(confdir):
                log(log.GENERAL, log.DEBUG,
                          "Trying database credentials from: {0}"\
                                .format(filename))
                yield obj
            else:
                log(log.GENERAL, log.DEBUG,
                          "Failed to read database credentials from: {0}"\
                                .format(filename))

        # try defaults if user did not specify anything
        if self._default:
            log(log.GENERAL, log.DEBUG, "Trying default database credentials")
            yield self

    def readXML(self, confdir):
        """
        obj.readXML(confdir) -> bool

        Reads the credentials from 'config.xml' in 'confdir'.
        """
        filename = os.path.join(confdir, 'config.xml')
        if not os.access(filename, os.R_OK):
            return False

        try:
            config = etree.parse(filename)
        except etree.XMLSyntaxError:
            return False

        dbnode = config.xpath('/Configuration/Database')
        if len(dbnode) == 0:
            return False

        name = config.xpath('/Configuration/LocalHostName/text()')
        if len(name):
            self.profile = name[0]

        for child in dbnode[0]:
            if child.tag in self._conf_trans:
                setattr(self, self._conf_trans[child.tag], child.text)
        return True

class DBCache( object ):
    """
    DBCache(db=None, args=None, **kwargs) -> database connection object

    Basic connection to the mythtv database.

    'db' will accept an existing DBCache object, or any subclass there of
    'args' will accept a tuple of 2-tuples for connection settings
    'kwargs' will accept a series of keyword arguments for connection settings
        'args' and 'kwargs' accept the following values:
            LocalHostName
            DBHostName
            DBName
            DBUserName
            DBPassword
            DBPort

    The class will first use an existing connection if provided, use the
        'args' and 'kwargs' values if sufficient information is available,
        falling back to '$MYTHCONFDIR/config.xml', '~/.mythtv/config.xml'
        and the default credentials.  The schema version is read once when
        the connection is made, and held in 'schemaVersion'.

    Available methods:
        obj.cursor()            - open a cursor for direct database
                                  manipulation
        obj.getRows()           - read table rows as records
        obj.insertRow()         - write a record as a new table row
    """
    logmodule = 'Python Database Connection'
    cursorclass = LoggedCursor
    shared = weakref.WeakValueDictionary()

    def __repr__(self):
        return "<%s '%s' v%s at %s>" % (self.__class__.__name__,
                 self.dbconfig.ident, self.schemaVersion, hex(id(self)))

    def __init__(self, db=None, args=None, **dbconn):
        self.db = None
        self.log = MythLog(self.logmodule)
        self.schemaVersion = None
        if db is not None:
            # load existing database connection
            self.log(MythLog.DATABASE, MythLog.DEBUG,
                            "Loading existing connection", db.dbconfig.ident)
            self.dbconfig = db.dbconfig
            self.db = db.db
            self.schemaVersion = getattr(db, 'schemaVersion', None)
            if self.schemaVersion is None:
                self.schemaVersion = self._readSchema()
            return

        # import settings from arguments and files
        if args is None:
            args = ()
        dbconfig = DatabaseConfig(args, **dbconn)
        lasterr = None
        for tmpconfig in dbconfig.test(self.log):
            # loop over possible sets of settings
            try:
                if self._testconfig(tmpconfig):
                    break
            except MythDBError as e:
                if e.ecode != MythError.DB_CONNECTION:
                    raise
                lasterr = e
        else:
            if lasterr is not None:
                raise lasterr
            raise MythDBError(MythError.DB_CREDENTIALS)

    def _testconfig(self, dbconfig):
        self.dbconfig = dbconfig
        db = self.shared.get(dbconfig)
        if db is None:
            # no exising connection, raises DB_CONNECTION on failure
            db = DBConnection(dbconfig)
            self.db = db
            db.schemaVersion = self._readSchema()
            self.shared[dbconfig] = db
        self.db = db
        self.schemaVersion = db.schemaVersion
        return True

    def _readSchema(self):
        with self.cursor(self.log) as cursor:
            if cursor.execute("""SELECT data
                                 FROM settings
                                 WHERE value=?""",
                              ('DBSchemaVer',)) == 0:
                raise MythDBError(MythError.DB_SETTING, 'DBSchemaVer',
                                  self.gethostname())
            sver = int(cursor.fetchone()[0])
        self.log(MythLog.DATABASE, MythLog.INFO,
                        "Database speaks schema version %d" % sver)
        return sver

    def gethostname(self):
        return self.dbconfig.profile

    def cursor(self, log=None):
        if not log:
            log = self.log
        return self.db.cursor(log, self.cursorclass)

    def __enter__(self): return self.db.__enter__()
    def __exit__(self, ty, va, tr): return self.db.__exit__(ty, va, tr)

    @staticmethod
    def _totoken(value):
        """Returns a column value as the raw token read by the codec."""
        if value is None:
            return None
        if isinstance(value, bool):
            return '1' if value else '0'
        if isinstance(value, _pydt.datetime):
            return value.strftime('%Y-%m-%d %H:%M:%S')
        if isinstance(value, _pydt.date):
            return value.isoformat()
        if isinstance(value, _pydt.timedelta):
            # mysql TIME columns arrive as a timedelta
            seconds = int(value.total_seconds())
            return '%02d:%02d:%02d' % (seconds//3600, seconds%3600//60,
                                       seconds%60)
        if isinstance(value, _pydt.time):
            return value.strftime('%H:%M:%S')
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode('utf-8')
        return str(value)

    def getRows(self, key, where=None, args=(), factory=None,
                      version=LATEST):
        """
        obj.getRows(key, where=None, args=(), factory=None) -> record generator

        Reads the rows of table 'key', selecting the columns present at
            the schema version of the database.  'where' is an optional
            SQL condition, with '?' placeholders filled from 'args'.
        """
        if factory is None:
            factory = records
        columns = factory.catalog.columns(key, self.schemaVersion)
        query = 'SELECT %s FROM %s' % \
                    (','.join('`%s`' % c for c in columns), key)
        if where:
            query += ' WHERE %s' % where

        with self.cursor(self.log) as cursor:
            cursor.execute(query, args)
            rows = cursor.fetchall()
        for row in rows:
            yield factory.fromRow(key, self.schemaVersion,
                                  [self._totoken(v) for v in row], version)

    def insertRow(self, record):
        """
        obj.insertRow(record) -> last inserted id

        Writes the encoded tokens of 'record' as a new row of its table.
            Unset tokens are written as NULL, leaving them to the column
            defaults.
        """
        key = record.fieldsetKey
        columns = record.catalog.columns(key, record.schemaVersion)
        data = [(c, t) for c,t in zip(columns, record._tokens) \
                        if t is not None]
        query = 'INSERT INTO %s (%s) VALUES (%s)' % \
                    (key, ','.join('`%s`' % c for c,t in data),
                     ','.join('?' for c,t in data))
        with self.cursor(self.log) as cursor:
            cursor.execute(query, [t for c,t in data])
            return cursor.lastrowid
