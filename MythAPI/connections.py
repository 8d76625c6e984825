# -*- coding: utf-8 -*-
"""Provides basic connection classes."""

from MythAPI.static import PROTO_VERSION, BACKEND_SEP
from MythAPI.logging import MythLog
from MythAPI.exceptions import MythError, MythDBError, MythBEError
from MythAPI.versions import protoToken
from MythAPI.utility import deadlinesocket, check_ipv6
from MythAPI import _conn_mysqldb as dbmodule
from MythAPI._conn_mysqldb import LoggedCursor

from threading import Lock, get_ident
from select import select
from time import time
import weakref
import socket

class _Connection_Pool( object ):
    """
    Provides a scaling connection pool to access a shared resource.
    """

    _defpoolsize = 2
    _logmode = MythLog.SOCKET

    def __init__(self):
        self._pool = []
        self._inuse = {}
        self._stack = {}
        self._poollock = Lock()
        self._poolsize = self._defpoolsize

        for i in range(self._poolsize):
            self._pool.append(self._connect())

    def __del__(self):
        for conn in self._pool:
            conn.close()
        for id,conn in self._inuse.items():
            conn.close()

    def acquire(self):
        with self._poollock:
            try:
                conn = self._pool.pop(0)
            except IndexError:
                # pool exhausted, grow it by one
                self.log(self._logmode, MythLog.DEBUG,
                         'Spawning new connection beyond pool size',
                         str(self._poolsize))
                conn = self._connect()
            self._inuse[id(conn)] = conn
            return conn

    def release(self, id):
        with self._poollock:
            conn = self._inuse.pop(id)
            if len(self._pool) < self._poolsize:
                self._pool.append(conn)
            else:
                conn.close()

class DBConnection( _Connection_Pool ):
    """
    This is the basic database connection object.
    You dont want to use this directly.
    """

    _logmode = MythLog.DATABASE

    def _connect(self):
        return dbmodule.dbconnect(self.dbconn, self.log)

    def __init__(self, dbconn):
        self.log = MythLog('Python Database Connection')
        self.dbconn = dbconn
        self._refs = {}

        self.log(MythLog.DATABASE, MythLog.INFO,
                        "Attempting connection: {0}".format(dbconn.ident))
        try:
            _Connection_Pool.__init__(self)
        except dbmodule.MySQLdb.Error:
            raise MythDBError(MythError.DB_CONNECTION, dbconn)

    def cursor(self, log=None, type=LoggedCursor):
        """
        Create a cursor on which queries may be performed.  The
            connection is returned to the pool once the cursor is
            garbage collected.
        """
        if log is None:
            log = self.log
        conn = self.acquire()
        cursor = conn.cursor(type)
        cursor.log = log

        r = weakref.ref(cursor, self._callback)
        self._refs[id(r)] = (r, id(conn))

        return cursor

    def _callback(self, ref):
        self.log(MythLog.DATABASE, MythLog.DEBUG, \
                    'database callback received',\
                     str(hex(id(ref))))
        ref, connid = self._refs.pop(id(ref))
        if connid in self._inuse:
            self.release(connid)

    def __enter__(self):
        cursor = self.cursor()
        ident = get_ident()
        if ident not in self._stack:
            self._stack[ident] = []
        self._stack[ident].append(cursor)
        return cursor

    def __exit__(self, type, value, traceback):
        ident = get_ident()
        if ident not in self._stack:
            raise MythError('Missing context stack in DBConnection')
        cursor = self._stack[ident].pop()
        if type:
            cursor.rollback()
        else:
            cursor.commit()
        cursor.close()

class BEConnection( object ):
    """
    BEConnection(backend, port, version=PROTO_VERSION, localname=None,
                 timeout=10.0) -> backend connection object

    This is the basic backend connection object, negotiating 'version'
        and announcing itself as a monitor.  The negotiated version is
        held in 'version'.
    You probably don't want to use this directly.
    """
    logmodule = 'Python Backend Connection'

    def __init__(self, backend, port, version=PROTO_VERSION, localname=None,
                    timeout=10.0):
        self.connected = False
        self.log = MythLog(self.logmodule)
        self._socklock = Lock()

        self.host = backend
        self.port = port
        self.version = version
        self.deadline = timeout

        self.localname = localname
        if self.localname is None:
            self.localname = socket.gethostname()

        try:
            self.connect()
        except socket.error:
            self.log.logTB(MythLog.SOCKET)
            self.connected = False
            self.log(MythLog.GENERAL, MythLog.CRIT,
                    "Couldn't connect to backend [%s]:%d" \
                    % (self.host, self.port))
            raise MythBEError(MythError.PROTO_CONNECTION, self.host, self.port)

    def __del__(self):
        if getattr(self, 'connected', False):
            try:
                self.disconnect()
            except (MythError, socket.error):
                pass

    def __repr__(self):
        return "<%s [%s]:%d v%d at %s>" % (self.__class__.__name__,
                        self.host, self.port, self.version, hex(id(self)))

    def connect(self):
        if self.connected:
            return
        self.log(MythLog.SOCKET|MythLog.NETWORK, MythLog.INFO,
                "Connecting to backend [%s]:%d" % (self.host, self.port))
        if check_ipv6(self.host):
            self.socket = deadlinesocket(socket.AF_INET6, socket.SOCK_STREAM)
        else:
            self.socket = deadlinesocket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.log = self.log
        self.socket.setdeadline(self.deadline)
        self.socket.connect((self.host, self.port))
        self.connected = True
        self.check_version()
        self.announce()

    def disconnect(self, hard=False):
        if not self.connected:
            return
        self.log(MythLog.SOCKET|MythLog.NETWORK, MythLog.INFO,
                "Terminating connection to [%s]:%d" % (self.host, self.port))
        if not hard:
            self.backendCommand('DONE', 0)
        self.connected = False
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except socket.error:
            pass
        self.socket.close()

    def reconnect(self, hard=False):
        self.disconnect(hard)
        self.connect()

    def announce(self):
        res = self.backendCommand('ANN Monitor %s 0' % self.localname)
        if res != 'OK':
            self.log(MythLog.GENERAL, MythLog.ERR,
                            "Unexpected answer to ANN", res)
            raise MythBEError(MythError.PROTO_ANNOUNCE,
                                                self.host, self.port, res)
        else:
            self.log(MythLog.SOCKET, MythLog.INFO,
                     "Successfully connected to backend",
                     "[%s]:%d" % (self.host, self.port))

    def check_version(self):
        token = protoToken(self.version)
        if token is None:
            cmd = 'MYTH_PROTO_VERSION %d' % self.version
        else:
            cmd = 'MYTH_PROTO_VERSION %d %s' % (self.version, token)
        res = self.backendCommand(cmd).split(BACKEND_SEP)
        if res[0] == 'REJECT':
            remote = res[1] if len(res) > 1 else None
            self.log(MythLog.GENERAL, MythLog.ERR,
                            "Backend has version %s, and we speak %s" %\
                            (remote, self.version))
            raise MythBEError(MythError.PROTO_MISMATCH, remote, self.version)
        if res[0] != 'ACCEPT':
            raise MythBEError(MythError.PROTO_ANNOUNCE,
                              self.host, self.port, BACKEND_SEP.join(res))
        if len(res) > 1:
            self.version = int(res[1])
        self.log(MythLog.SOCKET|MythLog.NETWORK, MythLog.DEBUG,
                        "Negotiated protocol version %d" % self.version)

    def backendCommand(self, data, deadline=None):
        """
        obj.backendCommand(data, deadline=None) -> response string

        Sends a formatted command via a socket to the mythbackend.
            'deadline' will override the default timeout given when the
            object was created.  An empty string is returned if nothing
            was received in time.
        """

        # return if not connected
        if not self.connected:
            return ''

        # pull default timeout
        if deadline is None:
            deadline = self.socket.getdeadline()
        if deadline < 1000:
            deadline += time()

        try:
            # lock socket access
            with self._socklock:
                self.socket.sendheader(data)
                # wait timeout for data to be received on the socket
                t = time()
                timeout = (deadline-t) if (deadline-t>0) else 0.0
                if len(select([self.socket],[],[], timeout)[0]) == 0:
                    return ''
                return self.socket.recvheader(deadline=deadline)
        except MythError as e:
            if getattr(e, 'sockcode', None) != 54:
                raise
            if data == 'DONE':
                # backend closes the connection in answer to DONE
                return ''
            # remote has closed connection, attempt reconnect
            self.reconnect(True)
            return self.backendCommand(data, deadline)

    def backendTokens(self, tokens, deadline=None):
        """
        obj.backendTokens(tokens, deadline=None) -> list of response tokens
        """
        return self.backendCommand(BACKEND_SEP.join(str(t) for t in tokens),
                                   deadline).split(BACKEND_SEP)
