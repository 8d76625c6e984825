import datetime as _pydt
from datetime import datetime as _pydatetime

import pytest

from MythAPI.logging import MythLog
from MythAPI.exceptions import MythDBError
from MythAPI.record import PropertyAwareRecord
from MythAPI.database import DatabaseConfig, DBCache
from MythAPI.methodheap import MythDB
from MythAPI.utility import datetime


class FakeCursor( object ):
    def __init__(self, conn, rows):
        self.conn = conn
        self.rows = rows
        self.lastrowid = None

    def execute(self, query, args=None):
        self.conn.executed.append((' '.join(query.split()), args))
        self.lastrowid = self.conn.nextid
        return len(self.rows)

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()


class FakeConnection( object ):
    """Answers each new cursor with the next queued result set."""
    def __init__(self, *results):
        self.results = list(results)
        self.executed = []
        self.nextid = 0

    def cursor(self, log=None, type=None):
        rows = self.results.pop(0) if self.results else []
        return FakeCursor(self, rows)


class FakeCache( object ):
    def __init__(self, conn, schemaVersion=None):
        self.db = conn
        self.dbconfig = DatabaseConfig(DBHostName='dbhost')
        self.schemaVersion = schemaVersion


def toy_row_class(factory):
    @factory.record('toyrow')
    class ToyRow( PropertyAwareRecord ):
        _fieldset = 'toyrow'
    return ToyRow


def test_schema_version_is_read_once():
    conn = FakeConnection([('1344',)])
    db = DBCache(FakeCache(conn))
    assert db.schemaVersion == 1344
    assert conn.executed == [('SELECT data FROM settings WHERE value=?',
                              ('DBSchemaVer',))]


def test_missing_schema_setting():
    conn = FakeConnection([])
    with pytest.raises(MythDBError) as exc:
        DBCache(FakeCache(conn))
    assert exc.value.ecode == MythDBError.DB_SETTING
    assert exc.value.setting == 'DBSchemaVer'


def test_known_schema_is_not_reread():
    conn = FakeConnection()
    db = DBCache(FakeCache(conn, 1300))
    assert db.schemaVersion == 1300
    assert conn.executed == []


def test_rows_in_utc(factory):
    ToyRow = toy_row_class(factory)
    conn = FakeConnection([(4, _pydatetime(2012, 5, 1, 10, 0), 'hi')])
    db = DBCache(FakeCache(conn, 1344))
    rows = list(db.getRows('toyrow', 'id=?', (4,), factory=factory))
    assert conn.executed == [
        ('SELECT `id`,`stamp`,`note` FROM toyrow WHERE id=?', (4,))]
    assert len(rows) == 1
    assert isinstance(rows[0], ToyRow)
    assert rows[0].id == 4
    assert rows[0].note == 'hi'
    assert rows[0].stamp == datetime(2012, 5, 1, 12, 0, 0)


def test_rows_in_local_time(factory):
    toy_row_class(factory)
    conn = FakeConnection([(4, _pydatetime(2012, 5, 1, 10, 0))])
    db = DBCache(FakeCache(conn, 1200))
    row = next(db.getRows('toyrow', factory=factory))
    assert conn.executed == [('SELECT `id`,`stamp` FROM toyrow', ())]
    assert row.note is None
    assert row.stamp.asnaiveutc() == _pydatetime(2012, 5, 1, 8, 0)


def test_insert_row(catalog):
    conn = FakeConnection()
    conn.nextid = 17
    db = DBCache(FakeCache(conn, 1344))
    row = PropertyAwareRecord(fieldset='toyrow', catalog=catalog)
    row.id = 4
    row.note = 'hi'
    assert db.insertRow(row) == 17
    assert conn.executed == [
        ('INSERT INTO toyrow (`id`,`note`) VALUES (?,?)', ['4', 'hi'])]


def test_get_jobs_query():
    conn = FakeConnection([])
    db = MythDB(FakeCache(conn, 1344))
    assert db.getJobs(1001, datetime(2012, 5, 1, 12, 0, 0)) == []
    query, args = conn.executed[0]
    assert query.endswith('FROM jobqueue WHERE chanid=? AND starttime=?')
    assert '`schedruntime`' in query
    assert args == [1001, '2012-05-01 10:00:00']


def test_get_jobs_before_utc_schema():
    conn = FakeConnection([])
    db = MythDB(FakeCache(conn, 1300))
    db.getJobs(starttime=datetime(2012, 5, 1, 12, 0, 0))
    query, args = conn.executed[0]
    assert query.endswith('FROM jobqueue WHERE starttime=?')
    assert args == ['2012-05-01 12:00:00']


def test_get_all_schedules():
    conn = FakeConnection([])
    db = MythDB(FakeCache(conn, 1344))
    assert db.getSchedules() == []
    query, args = conn.executed[0]
    assert query.startswith('SELECT `recordid`')
    assert query.endswith('FROM record')


@pytest.mark.parametrize('value, token', [
    (None,                              None),
    (True,                              '1'),
    (False,                             '0'),
    (_pydatetime(2012, 5, 1, 10, 0, 5), '2012-05-01 10:00:05'),
    (_pydt.date(2012, 5, 1),            '2012-05-01'),
    (_pydt.timedelta(hours=1, minutes=2, seconds=3), '01:02:03'),
    (_pydt.time(23, 59, 0),             '23:59:00'),
    (b'caf\xc3\xa9',                    'café'),
    (1001,                              '1001'),
])
def test_column_values_as_tokens(value, token):
    assert DBCache._totoken(value) == token


def test_get_global_settings():
    conn = FakeConnection([('BackendServerPort', '6543', None)])
    db = MythDB(FakeCache(conn, 1344))
    settings = db.getSettings()
    query, args = conn.executed[0]
    assert query == 'SELECT `value`,`data`,`hostname` FROM settings ' \
                    'WHERE hostname IS NULL'
    assert args == []
    assert settings[0].value == 'BackendServerPort'
    assert settings[0].data == '6543'
    assert settings[0].hostname is None


def test_get_host_settings_by_name():
    conn = FakeConnection([])
    db = MythDB(FakeCache(conn, 1344))
    db.getSettings('be1', 'BackendServerIP', 'BackendServerPort')
    query, args = conn.executed[0]
    assert query.endswith('WHERE (value=? OR value=?) AND hostname=?')
    assert args == ['BackendServerIP', 'BackendServerPort', 'be1']


def test_fill_status_from_database():
    conn = FakeConnection([
        ('MythFillEnabled', '1', None),
        ('mythfilldatabaseLastRunStart', '2012-05-01T10:00:00', None),
        ('mythfilldatabaseLastRunStatus', 'Successful.', None)])
    db = MythDB(FakeCache(conn, 1344))
    status = db.getMythFillStatus()
    query, args = conn.executed[0]
    assert 'hostname' not in query.split('WHERE')[1]
    assert args[0] == 'MythFillEnabled'
    assert len(args) == 9
    assert status.fill_enabled is True
    assert status.last_run_status == 'Successful.'
    assert status.last_run_start == datetime(2012, 5, 1, 12, 0, 0)
    assert status.isRunning()


def test_shutdown_status_from_database():
    conn = FakeConnection([('MythShutdownLock', '1', None)])
    db = MythDB(FakeCache(conn, 1344))
    status = db.getMythShutdownStatus()
    assert status.isShutdownLocked()
    assert status.idle_timeout is None


class TestDatabaseConfig( object ):
    def test_defaults(self):
        config = DatabaseConfig(())
        assert config.hostname == '127.0.0.1'
        assert config.port == 3306
        assert config.ident == 'sql://mythconverg@127.0.0.1:3306/'

    def test_keyword_values(self):
        config = DatabaseConfig((('DBPort', '3307'),), DBHostName='db',
                                DBUserName='me', LocalHostName='box')
        assert config.port == 3307
        assert config.hostname == 'db'
        assert config.username == 'me'
        assert config.profile == 'box'

    def test_placeholder_profile_is_ignored(self):
        config = DatabaseConfig(LocalHostName='box')
        config.profile = 'my-unique-identifier-goes-here'
        assert config.profile == 'box'

    def test_equality_and_copy(self):
        config = DatabaseConfig(DBHostName='db', DBPassword='secret')
        copy = config.copy()
        assert copy == config
        assert hash(copy) == hash(config)
        copy.password = 'other'
        assert copy != config

    def test_read_xml(self, tmp_path):
        (tmp_path / 'config.xml').write_text(
            '<Configuration>'
            '<LocalHostName>box</LocalHostName>'
            '<Database><Host>db</Host><UserName>me</UserName>'
            '<Password>pw</Password><DatabaseName>tv</DatabaseName>'
            '<Port>3307</Port></Database>'
            '</Configuration>')
        config = DatabaseConfig(())
        assert config.readXML(str(tmp_path))
        assert (config.hostname, config.username, config.password,
                config.database, config.port, config.profile) == \
                    ('db', 'me', 'pw', 'tv', 3307, 'box')

    def test_read_bad_xml(self, tmp_path):
        config = DatabaseConfig(())
        assert not config.readXML(str(tmp_path))
        (tmp_path / 'config.xml').write_text('<Configuration>')
        assert not config.readXML(str(tmp_path))
        (tmp_path / 'config.xml').write_text(
            '<Configuration><Other/></Configuration>')
        assert not config.readXML(str(tmp_path))

    def test_candidate_order(self, tmp_path, monkeypatch):
        confdir = tmp_path / 'conf'
        home = tmp_path / 'home'
        (home / '.mythtv').mkdir(parents=True)
        confdir.mkdir()
        (confdir / 'config.xml').write_text(
            '<Configuration><Database><Host>first</Host></Database>'
            '</Configuration>')
        (home / '.mythtv' / 'config.xml').write_text(
            '<Configuration><Database><Host>second</Host></Database>'
            '</Configuration>')
        monkeypatch.setenv('MYTHCONFDIR', str(confdir))
        monkeypatch.setenv('HOME', str(home))
        log = MythLog('test')

        given = DatabaseConfig(DBHostName='given')
        assert [c.hostname for c in given.test(log)] == \
                    ['given', 'first', 'second']
        default = DatabaseConfig(())
        assert [c.hostname for c in default.test(log)] == \
                    ['first', 'second', '127.0.0.1']
