# -*- coding: utf-8 -*-
"""Provides the mysqlclient connection and its logging cursor."""

from MythAPI.logging import MythLog
from MythAPI.exceptions import MythDBError

import warnings
with warnings.catch_warnings():
    warnings.simplefilter('ignore')
    import MySQLdb, MySQLdb.cursors

__version__ = tuple(['MySQLdb']+list(MySQLdb.version_info))

def dbconnect(dbconn, log):
    log(MythLog.DATABASE|MythLog.EXTRA, MythLog.INFO,
                    'Spawning new database connection')
    db = MySQLdb.connect(  user=   dbconn.username,
                           host=   dbconn.hostname,
                           passwd= dbconn.password,
                           db=     dbconn.database,
                           port=   dbconn.port,
                           use_unicode=True,
                           charset='utf8')
    db.autocommit(True)
    return db

class LoggedCursor( MySQLdb.cursors.Cursor ):
    """
    Custom cursor, offering logging and error handling
    """
    def __init__(self, connection):
        super(LoggedCursor, self).__init__(connection)
        self.log = None
        self.ping()

    def ping(self): self.connection.ping()

    def _sanitize(self, query): return query.replace('?', '%s')

    def log_query(self, query, args):
        if self.log is not None:
            self.log(MythLog.DATABASE, MythLog.DEBUG,
                     ' '.join(query.split()), str(args))

    def execute(self, query, args=None):
        """
        Execute a query, with '?' used as the parameter placeholder.

        Returns integer rows affected, if any
        """
        self.ping()
        query = self._sanitize(query)
        self.log_query(query, args)
        try:
            if args is None:
                return super(LoggedCursor, self).execute(query)
            return super(LoggedCursor, self).execute(query, args)
        except MySQLdb.Error as e:
            raise MythDBError(MythDBError.DB_RAW, e.args)

    def commit(self): self.connection.commit()
    def rollback(self): self.connection.rollback()

    def __enter__(self):
        return self
    def __exit__(self, type, value, traceback):
        if type:
            self.rollback()
        else:
            self.commit()
        self.close()
