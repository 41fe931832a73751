"""Tests for the client record lifecycle, without HTTP."""

import threading
from datetime import date
from decimal import Decimal

import pytest

from app.core.exceptions import AuthError, ConflictError, NotFoundError, StorageError, ValidationError
from app.core.security import decode_access_token, verify_password
from app.services import auth_services, client_service
from app.services.auth_services import AuthService
from app.services.client_service import ClientService, normalize_fields, parse_date
from app.services.storage_service import AttachmentUploader
from fakes import FailingStorage, InMemoryClientRepository, make_upload, staged_files

ASHA = {"first_name": "Asha", "mobile": "9990001111"}


@pytest.fixture
def service(client_repo, uploader, settings):
    return ClientService(client_repo, uploader, settings)


class TestRegister:

    async def test_stores_hash_not_plaintext(self, service, client_repo):
        client = await service.register("9990001111", "pass123")

        stored = client_repo.rows[client["id"]]
        assert stored["hashed_password"] != "pass123"
        assert verify_password("pass123", stored["hashed_password"])

    async def test_duplicate_mobile_conflicts_and_keeps_one_record(self, service, client_repo):
        await service.register("9990001111", "pass123")
        with pytest.raises(ConflictError):
            await service.register("9990001111", "other")
        assert len(client_repo.rows) == 1

    @pytest.mark.parametrize("mobile, password", [("", "pass123"), ("9990001111", ""), (None, None)])
    async def test_missing_fields(self, service, mobile, password):
        with pytest.raises(ValidationError):
            await service.register(mobile, password)

    async def test_unique_index_is_the_backstop_for_a_lost_race(self, uploader, settings):
        class RacingRepository(InMemoryClientRepository):
            async def get_by_mobile(self, mobile):
                # another request inserted between the check and the insert
                return None

        repo = RacingRepository()
        service = ClientService(repo, uploader, settings)
        await service.register("9990001111", "pass123")

        with pytest.raises(ConflictError):
            await service.register("9990001111", "pass123")
        assert len(repo.rows) == 1


class TestCreate:

    async def test_minimal_profile_gets_defaults(self, service):
        client = await service.create(dict(ASHA), "pass123")

        assert client["first_name"] == "Asha"
        assert client["photo"] is None
        assert client["license_file"] is None
        assert client["total_fee"] == 0
        assert client["classes_attended"] == 0

    @pytest.mark.parametrize("missing", ["first_name", "mobile"])
    async def test_required_fields(self, service, missing):
        fields = {k: v for k, v in ASHA.items() if k != missing}
        with pytest.raises(ValidationError):
            await service.create(fields, "pass123")

    async def test_password_required(self, service):
        with pytest.raises(ValidationError):
            await service.create(dict(ASHA), None)

    async def test_duplicate_mobile(self, service):
        await service.register("9990001111", "pass123")
        with pytest.raises(ConflictError):
            await service.create(dict(ASHA), "pass123")

    async def test_files_are_uploaded_to_their_folders(self, service, storage, upload_dir):
        files = {"photo": make_upload(b"face", "face.jpg"), "license_file": make_upload(b"dl", "dl.pdf")}
        client = await service.create(dict(ASHA), "pass123", files)

        assert "/driving_school/photos/" in client["photo"]
        assert "/driving_school/licenses/" in client["license_file"]
        assert [u["content"] for u in storage.uploads] == [b"face", b"dl"]
        assert staged_files(upload_dir) == []

    async def test_upload_failure_persists_nothing(self, client_repo, settings, upload_dir):
        service = ClientService(client_repo, AttachmentUploader(FailingStorage(), upload_dir), settings)

        with pytest.raises(StorageError):
            await service.create(dict(ASHA), "pass123", {"photo": make_upload()})
        assert client_repo.rows == {}
        assert staged_files(upload_dir) == []

    async def test_dates_and_numbers_are_typed(self, service):
        fields = dict(ASHA, dob="1999-04-12", main_test_date="2025-03-01T09:30:00Z",
                      total_fee="6500.50", total_classes="20")
        client = await service.create(fields, "pass123")

        assert client["dob"] == date(1999, 4, 12)
        assert client["main_test_date"] == date(2025, 3, 1)
        assert client["total_fee"] == Decimal("6500.50")
        assert client["total_classes"] == 20

    async def test_unparseable_date_is_rejected(self, service, client_repo):
        with pytest.raises(ValidationError, match="dob"):
            await service.create(dict(ASHA, dob="31/31/1999"), "pass123")
        assert client_repo.rows == {}


class TestLogin:

    async def test_unknown_mobile_and_wrong_password_look_the_same(self, service):
        await service.register("9990001111", "pass123")

        with pytest.raises(AuthError) as unknown:
            await service.login("9000000000", "pass123")
        with pytest.raises(AuthError) as wrong:
            await service.login("9990001111", "wrong")

        assert unknown.value.message == wrong.value.message == "Invalid mobile or password"
        assert unknown.value.status_code == wrong.value.status_code

    async def test_success_issues_token_for_client(self, service, settings):
        client = await service.register("9990001111", "pass123")
        result = await service.login("9990001111", "pass123")

        payload = decode_access_token(result["token"], settings.SECRET_KEY, settings.ALGORITHM)
        assert payload.sub == str(client["id"])
        assert payload.role == "client"
        assert result["client"]["id"] == client["id"]


class TestPasswordWorkLeavesTheEventLoop:

    @pytest.fixture
    def bcrypt_threads(self, monkeypatch):
        """Record the thread every hash/verify call runs on."""
        seen = {}

        def recording(name, func):
            def wrapper(*args):
                seen.setdefault(name, []).append(threading.get_ident())
                return func(*args)
            return wrapper

        for module in (client_service, auth_services):
            for name in ("hash_password", "verify_password", "dummy_verify"):
                monkeypatch.setattr(module, name, recording(name, getattr(module, name)))
        return seen

    async def test_client_flows(self, service, bcrypt_threads):
        await service.register("9990001111", "pass123")
        await service.create(dict(ASHA, mobile="9990002222"), "pass123")
        await service.login("9990001111", "pass123")
        with pytest.raises(AuthError):
            await service.login("9000000000", "pass123")

        loop_thread = threading.get_ident()
        assert set(bcrypt_threads) == {"hash_password", "verify_password", "dummy_verify"}
        assert all(loop_thread not in idents for idents in bcrypt_threads.values())

    async def test_admin_flows(self, admin_repo, settings, bcrypt_threads):
        auth = AuthService(admin_repo, settings)
        await auth.register_admin("boss", "s3cret")
        await auth.login("boss", "s3cret")
        with pytest.raises(AuthError):
            await auth.login("nobody", "s3cret")

        loop_thread = threading.get_ident()
        assert set(bcrypt_threads) == {"hash_password", "verify_password", "dummy_verify"}
        assert all(loop_thread not in idents for idents in bcrypt_threads.values())


class TestReadAndDelete:

    async def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.get(404)

    async def test_list_newest_first(self, service):
        for i in range(3):
            await service.register(f"900000000{i}", "pass123")
        mobiles = [c["mobile"] for c in await service.list()]
        assert mobiles == ["9000000002", "9000000001", "9000000000"]

    async def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.delete(404)

    async def test_deleted_client_is_gone(self, service):
        client = await service.create(dict(ASHA), "pass123")
        await service.delete(client["id"])
        with pytest.raises(NotFoundError):
            await service.get(client["id"])


class TestUpdate:

    async def test_only_given_fields_change(self, service):
        client = await service.create(dict(ASHA, phone="0801234567", class_of_vehicle="LMV"), "pass123")

        updated = await service.update(client["id"], {"dob": "2020-01-01"})

        assert updated["dob"] == date(2020, 1, 1)
        assert isinstance(updated["dob"], date)
        for field in ("first_name", "mobile", "phone", "class_of_vehicle", "photo", "total_fee"):
            assert updated[field] == client[field]

    async def test_empty_string_overwrites(self, service):
        client = await service.create(dict(ASHA, relation="S/O Ravi", dob="1999-01-01"), "pass123")
        updated = await service.update(client["id"], {"relation": "", "dob": ""})
        assert updated["relation"] == ""
        assert updated["dob"] is None

    async def test_bad_date_leaves_record_untouched(self, service, client_repo):
        client = await service.create(dict(ASHA), "pass123")
        with pytest.raises(ValidationError):
            await service.update(client["id"], {"first_name": "Asha K", "expiry_of_ll": "soon"})
        assert client_repo.rows[client["id"]]["first_name"] == "Asha"

    async def test_new_photo_replaces_reference(self, service):
        client = await service.create(dict(ASHA), "pass123", {"photo": make_upload(b"old")})
        updated = await service.update(client["id"], {}, {"photo": make_upload(b"new", "new.png")})

        assert updated["photo"] != client["photo"]
        assert updated["photo"].endswith("-new.png")
        assert updated["license_file"] is None

    async def test_missing_client_uploads_nothing(self, service, storage):
        with pytest.raises(NotFoundError):
            await service.update(404, {"first_name": "x"}, {"photo": make_upload()})
        assert storage.uploads == []

    async def test_mobile_collision_on_update(self, service):
        await service.register("9000000001", "pass123")
        other = await service.register("9000000002", "pass123")
        with pytest.raises(ConflictError):
            await service.update(other["id"], {"mobile": "9000000001"})

    @pytest.mark.parametrize("mobile", [None, "", "   "])
    async def test_mobile_cannot_be_cleared(self, service, client_repo, mobile):
        client = await service.create(dict(ASHA), "pass123")
        with pytest.raises(ValidationError, match="Mobile cannot be empty"):
            await service.update(client["id"], {"mobile": mobile, "first_name": "Asha K"})
        assert client_repo.rows[client["id"]]["mobile"] == "9990001111"
        assert client_repo.rows[client["id"]]["first_name"] == "Asha"


class TestFieldParsing:

    @pytest.mark.parametrize("raw, expected", [
        ("2020-01-01", date(2020, 1, 1)),
        ("2020-01-01T00:00:00.000Z", date(2020, 1, 1)),
        (" 2021-12-31 ", date(2021, 12, 31)),
        ("", None),
        (None, None),
    ])
    def test_parse_date(self, raw, expected):
        assert parse_date("dob", raw) == expected

    @pytest.mark.parametrize("raw", ["Invalid Date", "2020-13-01", "tomorrow"])
    def test_parse_date_rejects(self, raw):
        with pytest.raises(ValidationError):
            parse_date("dob", raw)

    def test_error_names_the_wire_field(self):
        with pytest.raises(ValidationError, match="expiryOfLL"):
            parse_date("expiry_of_ll", "never")

    @pytest.mark.parametrize("fields", [{"total_fee": "a lot"}, {"total_classes": "2.5"}, {"paid_fee": "NaN"}])
    def test_bad_numbers(self, fields):
        with pytest.raises(ValidationError):
            normalize_fields(fields)

    def test_untyped_fields_pass_through(self):
        assert normalize_fields({"relation": "", "phone": "123"}) == {"relation": "", "phone": "123"}
