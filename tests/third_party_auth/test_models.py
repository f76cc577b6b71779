import pytest

from authkit.third_party_auth import (
    AuthCallback,
    AuthCodes,
    AuthConfig,
    AuthException,
    AuthResponse,
    AuthResponseStatus,
    AuthToken,
    AuthUserGender,
)


class TestAuthUserGender:
    @pytest.mark.parametrize("code", ["1", 1, "m", "M", "male", "男"])
    def test_male(self, code):
        assert AuthUserGender.from_code(code) == AuthUserGender.MALE

    @pytest.mark.parametrize("code", ["2", 2, "f", "Female", "女"])
    def test_female(self, code):
        assert AuthUserGender.from_code(code) == AuthUserGender.FEMALE

    @pytest.mark.parametrize("code", [None, "", "0", 0, "x", "其他"])
    def test_unknown(self, code):
        assert AuthUserGender.from_code(code) == AuthUserGender.UNKNOWN


class TestAuthCallback:
    def test_from_query(self):
        callback = AuthCallback.from_query({"code": "C", "state": "S", "lang": "zh_CN"})

        assert callback.code == "C"
        assert callback.state == "S"
        assert callback.extras == {"lang": "zh_CN"}

    def test_from_query_missing_values(self):
        callback = AuthCallback.from_query({})
        assert callback.code == ""
        assert callback.state == ""


class TestAuthResponse:
    def test_success(self):
        token = AuthToken(access_token="T", source="github")
        resp = AuthResponse.success(token)

        assert resp.ok
        assert resp.code == 2000
        assert resp.to_dict()["data"]["access_token"] == "T"

    def test_failure_defaults(self):
        resp = AuthResponse.failure(AuthResponseStatus.STATE_MISMATCH)

        assert not resp.ok
        assert resp.code == AuthCodes.STATE_MISMATCH.code
        assert resp.msg == "Illegal state"
        assert resp.data is None

    def test_from_exception_keeps_provider_code(self):
        exc = AuthException(AuthResponseStatus.PROVIDER_ERROR, code="bad_verification_code", msg="expired")
        resp = AuthResponse.from_exception(exc)

        assert resp.to_dict() == {
            "status": "provider_error",
            "code": "bad_verification_code",
            "msg": "expired",
            "data": None,
        }


class TestAuthCodes:
    def test_every_status_has_a_code(self):
        codes = [AuthCodes.of(status).code for status in AuthResponseStatus]
        assert len(codes) == len(set(codes))

    def test_msg_language_fallback(self):
        assert AuthCodes.STATE_MISMATCH.get_msg("zh") == "state 无效、已过期或已被使用"
        assert AuthCodes.STATE_MISMATCH.get_msg("fr") == "Illegal state"


class TestAuthConfig:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"client_id": "", "client_secret": "s", "redirect_uri": "https://e.com/cb"},
            {"client_id": "id", "client_secret": "", "redirect_uri": "https://e.com/cb"},
            {"client_id": "id", "client_secret": "s", "redirect_uri": ""},
        ],
    )
    def test_required_fields(self, kwargs):
        with pytest.raises(ValueError):
            AuthConfig(**kwargs)

    def test_scopes_normalized_to_tuple(self):
        config = AuthConfig("id", "s", "https://e.com/cb", scopes=["a", "b"])
        assert config.scopes == ("a", "b")

    def test_repr_hides_secret(self):
        assert "top-secret" not in repr(AuthConfig("id", "top-secret", "https://e.com/cb"))
