"""인증 API 테스트 — 회원가입, 로그인, 토큰 갱신, /me 엔드포인트.

Auth API tests — Registration, login, token refresh, and /me endpoints.
Covers the refresh rotation lifecycle and the uniform 401 responses.
"""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy import func, select

from blogapi.config import settings
from blogapi.models.user import User
from blogapi.utils.jwt import create_refresh_token, decode_access_token, sign_token
from tests.conftest import USER_EMAIL, USER_PASSWORD, auth_header

AUTH = "/auth"


async def _login(client: AsyncClient, email: str = USER_EMAIL, password: str = USER_PASSWORD) -> dict:
    res = await client.post(f"{AUTH}/login", json={"email": email, "password": password})
    assert res.status_code == 200
    return res.json()


# ===== Register =====

class TestRegister:
    """회원가입 테스트."""

    async def test_register_success(self, client: AsyncClient, db):
        """회원가입 성공 — 201과 생성된 ID 반환."""
        res = await client.post(f"{AUTH}/register", json={
            "email": "a@example.com",
            "password": "password123",
            "name": "A",
        })
        assert res.status_code == 201
        data = res.json()
        assert isinstance(data["id"], int)

        user = await db.get(User, data["id"])
        assert user.email == "a@example.com"
        assert user.password != "password123"
        assert user.hashed_refresh_token is None

    async def test_register_duplicate_email(self, client: AsyncClient, db, user):
        """중복 이메일로 회원가입 시 409, 메시지에 이메일 포함, 행 추가 없음."""
        res = await client.post(f"{AUTH}/register", json={
            "email": USER_EMAIL,
            "password": "another123",
            "name": "Other",
        })
        assert res.status_code == 409
        assert USER_EMAIL in res.json()["detail"]

        count = (await db.execute(select(func.count()).select_from(User))).scalar()
        assert count == 1

    async def test_register_email_case_preserved(self, client: AsyncClient, db):
        """이메일은 정규화 없이 저장 — 대소문자만 다른 주소는 별도 사용자."""
        upper = await client.post(f"{AUTH}/register", json={
            "email": "a@B.com",
            "password": "password123",
            "name": "Upper",
        })
        lower = await client.post(f"{AUTH}/register", json={
            "email": "a@b.com",
            "password": "password123",
            "name": "Lower",
        })
        assert upper.status_code == 201
        assert lower.status_code == 201
        assert upper.json()["id"] != lower.json()["id"]

        emails = (await db.execute(select(User.email).order_by(User.id))).scalars().all()
        assert emails == ["a@B.com", "a@b.com"]

        dup = await client.post(f"{AUTH}/register", json={
            "email": "a@B.com",
            "password": "password123",
            "name": "Again",
        })
        assert dup.status_code == 409
        assert dup.json()["detail"] == "User with email 'a@B.com' already exists"

    async def test_register_short_password(self, client: AsyncClient):
        """8자 미만 비밀번호는 400."""
        res = await client.post(f"{AUTH}/register", json={
            "email": "short@example.com",
            "password": "1234567",
            "name": "Short",
        })
        assert res.status_code == 400

    async def test_register_invalid_email(self, client: AsyncClient):
        """이메일 형식 오류는 400."""
        res = await client.post(f"{AUTH}/register", json={
            "email": "not-an-email",
            "password": "password123",
            "name": "Bad",
        })
        assert res.status_code == 400

    async def test_register_missing_name(self, client: AsyncClient):
        """필수 필드 누락은 400."""
        res = await client.post(f"{AUTH}/register", json={
            "email": "noname@example.com",
            "password": "password123",
        })
        assert res.status_code == 400


# ===== Login =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, db, user):
        """로그인 성공 — 토큰 쌍 발급 및 다이제스트 저장."""
        data = await _login(client)
        assert set(data) == {"accessToken", "refreshToken"}

        await db.refresh(user)
        assert user.hashed_refresh_token is not None
        assert data["refreshToken"] not in user.hashed_refresh_token

    async def test_login_access_token_identity(self, client: AsyncClient, user):
        """액세스 토큰에 사용자 ID와 이메일이 담김."""
        data = await _login(client)
        payload = decode_access_token(data["accessToken"])
        assert payload["sub"] == str(user.id)
        assert payload["email"] == USER_EMAIL
        assert payload["type"] == "access"

    async def test_login_wrong_password(self, client: AsyncClient, db, user):
        """잘못된 비밀번호 — 401, 다이제스트 기록 없음."""
        res = await client.post(f"{AUTH}/login", json={
            "email": USER_EMAIL,
            "password": "wrong_password",
        })
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid email or password"

        await db.refresh(user)
        assert user.hashed_refresh_token is None

    async def test_login_nonexistent_user(self, client: AsyncClient):
        """존재하지 않는 이메일 — 같은 메시지의 401."""
        res = await client.post(f"{AUTH}/login", json={
            "email": "nobody@x.com",
            "password": "whatever",
        })
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid email or password"

    async def test_login_email_is_case_sensitive(self, client: AsyncClient, user):
        """이메일은 저장된 그대로 일치해야 함."""
        res = await client.post(f"{AUTH}/login", json={
            "email": "Writer@example.com",
            "password": USER_PASSWORD,
        })
        assert res.status_code == 401

    async def test_login_missing_password(self, client: AsyncClient):
        """비밀번호 누락은 400."""
        res = await client.post(f"{AUTH}/login", json={"email": USER_EMAIL})
        assert res.status_code == 400


# ===== Token Refresh =====

class TestTokenRefresh:
    """토큰 갱신 테스트."""

    async def test_refresh_rotates_token(self, client: AsyncClient, user):
        """갱신 시 새 리프레시 토큰 발급, 신원 정보 유지."""
        tokens = await _login(client)

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert res.status_code == 200
        data = res.json()
        assert data["refreshToken"] != tokens["refreshToken"]

        payload = decode_access_token(data["accessToken"])
        assert payload["sub"] == str(user.id)
        assert payload["email"] == USER_EMAIL

    async def test_refresh_replay_rejected(self, client: AsyncClient, user):
        """이미 사용된 리프레시 토큰 재사용 시 401."""
        tokens = await _login(client)
        first = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert first.status_code == 200

        replay = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert replay.status_code == 401
        assert replay.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_chain(self, client: AsyncClient, user):
        """회전된 토큰으로 연속 갱신 가능."""
        current = (await _login(client))["refreshToken"]
        for _ in range(3):
            res = await client.post(f"{AUTH}/refresh", json={"refreshToken": current})
            assert res.status_code == 200
            current = res.json()["refreshToken"]

    async def test_relogin_invalidates_previous_refresh(self, client: AsyncClient, user):
        """재로그인 시 이전 리프레시 토큰 무효화."""
        first = await _login(client)
        await _login(client)

        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": first["refreshToken"]})
        assert res.status_code == 401

    async def test_refresh_with_access_token(self, client: AsyncClient, user):
        """액세스 토큰을 리프레시 토큰으로 사용 시 401 (리프레시 비밀키 서명 불일치)."""
        tokens = await _login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["accessToken"]})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_access_class_signed_with_refresh_secret(self, client: AsyncClient, user):
        """리프레시 비밀키로 서명됐지만 type이 access인 토큰은 401."""
        await _login(client)
        token = sign_token(
            {"sub": str(user.id), "email": user.email, "type": "access"},
            settings.JWT_REFRESH_SECRET,
            timedelta(minutes=5),
        )
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": token})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_expired_token(self, client: AsyncClient, user):
        """만료된 리프레시 토큰은 401."""
        await _login(client)
        token = sign_token(
            {"sub": str(user.id), "email": user.email, "type": "refresh", "jti": "expired"},
            settings.JWT_REFRESH_SECRET,
            timedelta(seconds=-1),
        )
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": token})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_token_signed_with_wrong_secret(self, client: AsyncClient, user):
        """다른 비밀키로 재서명된 리프레시 토큰은 401."""
        await _login(client)
        token = sign_token(
            {"sub": str(user.id), "email": user.email, "type": "refresh", "jti": "forged"},
            "not-the-refresh-secret",
            timedelta(minutes=5),
        )
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": token})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_with_invalid_token(self, client: AsyncClient):
        """형식이 잘못된 토큰으로 갱신 실패."""
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": "invalid.token.here"})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_before_any_login(self, client: AsyncClient, user):
        """서명은 유효하지만 저장된 다이제스트가 없으면 401."""
        token = create_refresh_token({"sub": str(user.id), "email": user.email})
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": token})
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid or expired refresh token"

    async def test_refresh_unknown_user(self, client: AsyncClient):
        """존재하지 않는 사용자의 토큰은 401."""
        token = create_refresh_token({"sub": "9999", "email": "ghost@example.com"})
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": token})
        assert res.status_code == 401

    async def test_refresh_missing_body(self, client: AsyncClient):
        """refreshToken 누락은 400."""
        res = await client.post(f"{AUTH}/refresh", json={})
        assert res.status_code == 400


# ===== /me Endpoint =====

class TestGetMe:
    """현재 사용자 프로필 조회 테스트."""

    async def test_get_me_success(self, client: AsyncClient, user, access_token):
        """인증된 사용자 정보 조회 성공."""
        res = await client.get(f"{AUTH}/me", headers=auth_header(access_token))
        assert res.status_code == 200
        assert res.json() == {"id": user.id, "email": USER_EMAIL, "name": "Test Writer"}

    async def test_get_me_no_token(self, client: AsyncClient):
        """토큰 없이 /me 접근 시 401."""
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_get_me_invalid_token(self, client: AsyncClient):
        """유효하지 않은 토큰으로 /me 접근 시 401."""
        res = await client.get(f"{AUTH}/me", headers=auth_header("invalid.jwt.token"))
        assert res.status_code == 401

    async def test_get_me_with_refresh_token(self, client: AsyncClient, user):
        """리프레시 토큰을 Bearer로 사용 시 401."""
        tokens = await _login(client)
        res = await client.get(f"{AUTH}/me", headers=auth_header(tokens["refreshToken"]))
        assert res.status_code == 401

    async def test_get_me_after_refresh(self, client: AsyncClient, user):
        """갱신된 액세스 토큰으로 /me 접근 가능."""
        tokens = await _login(client)
        res = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        new_access = res.json()["accessToken"]

        me = await client.get(f"{AUTH}/me", headers=auth_header(new_access))
        assert me.status_code == 200
        assert me.json()["email"] == USER_EMAIL


# ===== End-to-end scenario =====

class TestScenario:
    """회원가입부터 재사용 감지까지 전체 흐름."""

    async def test_full_lifecycle(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/register", json={
            "email": "a@b.com", "password": "password123", "name": "A",
        })
        assert res.status_code == 201
        assert res.json() == {"id": 1}

        tokens = await _login(client, "a@b.com", "password123")

        rotated = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert rotated.status_code == 200

        replay = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refreshToken"]})
        assert replay.status_code == 401

    async def test_duplicate_register_message(self, client: AsyncClient):
        body = {"email": "a@b.com", "password": "password123", "name": "A"}
        assert (await client.post(f"{AUTH}/register", json=body)).status_code == 201

        res = await client.post(f"{AUTH}/register", json=body)
        assert res.status_code == 409
        assert "a@b.com" in res.json()["detail"]

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.json() == {"status": "ok"}
