import pytest

from pagewalk import NotConnected, connect, disconnect, get_client, get_database
from pagewalk.sources.connection import _extract_db_name

URI = "mongodb://localhost:27017/pagewalk_test"


@pytest.fixture
async def connection():
    db = await connect(URI)
    yield db
    await disconnect()


class TestConnect:
    async def test_connect_returns_database(self, connection):
        assert connection.name == "pagewalk_test"

    async def test_get_database_returns_connected_db(self, connection):
        assert get_database().name == "pagewalk_test"

    async def test_get_client_returns_connected_client(self, connection):
        assert get_client() is not None

    async def test_disconnect_removes_connection(self, connection):
        await disconnect()
        with pytest.raises(NotConnected):
            get_database()
        with pytest.raises(NotConnected):
            get_client()

    async def test_multiple_aliases(self, connection):
        db2 = await connect("mongodb://localhost:27017/pagewalk_test_alt", alias="secondary")
        try:
            assert db2.name == "pagewalk_test_alt"
            assert get_database("secondary").name == "pagewalk_test_alt"
            assert get_database("default").name == "pagewalk_test"
        finally:
            await disconnect("secondary")

    async def test_reconnect_replaces_alias(self, connection):
        db = await connect("mongodb://localhost:27017/pagewalk_other")
        assert get_database().name == "pagewalk_other"
        assert db.name == "pagewalk_other"

    async def test_unknown_alias_raises(self):
        with pytest.raises(NotConnected, match="reports"):
            get_database("reports")


class TestExtractDbName:
    def test_with_query_string(self):
        assert _extract_db_name("mongodb://user:pw@host:27017/school?authSource=admin") == "school"

    def test_srv_uri(self):
        assert _extract_db_name("mongodb+srv://cluster0.example.net/portal") == "portal"

    @pytest.mark.parametrize(
        "uri",
        ["", "mongodb://localhost:27017", "mongodb://localhost:27017/", "mongodb://localhost/bad.name"],
    )
    def test_invalid(self, uri):
        with pytest.raises(ValueError):
            _extract_db_name(uri)
