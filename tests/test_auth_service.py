from datetime import datetime, timedelta

from app.core.security import hash_otp, hash_password, verify_password


def seed_user(user_repo, email="jane@example.com", password="Secret@123", **fields):
    fields.setdefault("role", ["user"])
    return user_repo.seed(email=email, password=hash_password(password), **fields)


def pending_otp(otp="123456", attempts=0, expires_in=10):
    return {
        "otp_hash": hash_otp(otp),
        "expires_at": datetime.utcnow() + timedelta(minutes=expires_in),
        "attempts": attempts,
        "verified": False,
    }


# Register / login

async def test_register_fails_when_user_exists(auth_service, user_repo):
    seed_user(user_repo)
    result = await auth_service.register("jane@example.com", "Secret@123")
    assert result == {"success": False, "error": "User already exists"}


async def test_register_hashes_password_and_normalizes_email(auth_service, user_repo):
    result = await auth_service.register("  Jane@Example.com ", "Secret@123")
    assert result["success"] is True
    assert "password" not in result["user"]

    stored = await user_repo.find_by_email("jane@example.com")
    assert stored["password"] != "Secret@123"
    assert verify_password("Secret@123", stored["password"])
    assert stored["role"] == ["user"]


async def test_register_reports_failure_when_repository_fails(auth_service, user_repo):
    user_repo.fail = True
    result = await auth_service.register("jane@example.com", "Secret@123")
    assert result == {"success": False, "error": "Registration failed"}


async def test_login_rejects_wrong_password(auth_service, user_repo):
    seed_user(user_repo)
    result = await auth_service.login("jane@example.com", "Wrong@123")
    assert result == {"success": False, "error": "Invalid credentials"}


async def test_login_rejects_unknown_email(auth_service):
    result = await auth_service.login("nobody@example.com", "Secret@123")
    assert result == {"success": False, "error": "Invalid credentials"}


async def test_login_returns_user_without_secrets(auth_service, user_repo):
    seed_user(user_repo, reset_otp=pending_otp())
    result = await auth_service.login("jane@example.com", "Secret@123")
    assert result["success"] is True
    assert "password" not in result["user"]
    assert "reset_otp" not in result["user"]


async def test_issue_tokens_carries_roles(auth_service, user_repo):
    user = seed_user(user_repo, role=["user", "seller"])
    tokens = auth_service.issue_tokens(user)
    assert tokens["user_id"] == user["id"]
    assert tokens["role"] == ["user", "seller"]
    assert tokens["access_token"] and tokens["refresh_token"]


async def test_refresh_issues_new_access_token(auth_service, user_repo):
    user = seed_user(user_repo)
    tokens = auth_service.issue_tokens(user)
    result = await auth_service.refresh(tokens["refresh_token"])
    assert result["success"] is True
    assert result["tokens"]["access_token"]


async def test_check_password(auth_service, user_repo):
    seed_user(user_repo)
    user_repo.seed(email="oauth@example.com", role=["user"])

    assert await auth_service.check_password("jane@example.com") == {"success": True}
    assert await auth_service.check_password("oauth@example.com") == {
        "success": False,
        "error": "Password not set",
    }


async def test_update_last_login_swallows_repository_errors(auth_service, user_repo):
    user = seed_user(user_repo)
    user_repo.fail = True
    # Must not raise
    await auth_service.update_last_login(user["id"], datetime.utcnow())


async def test_update_last_login_stores_timestamp(auth_service, user_repo):
    user = seed_user(user_repo)
    now = datetime.utcnow()
    await auth_service.update_last_login(user["id"], now)
    assert user_repo.docs[user["id"]]["last_login"] == now


# forget_password

async def test_forget_password_unknown_email(auth_service):
    result = await auth_service.forget_password("nobody@example.com")
    assert result == {"success": False, "error": "User with this email does not exist"}


async def test_forget_password_stores_hash_and_emails_code(auth_service, user_repo, email_service):
    user = seed_user(user_repo)
    result = await auth_service.forget_password("jane@example.com")
    assert result == {"success": True}

    assert len(email_service.sent) == 1
    otp = email_service.sent[0]["otp"]
    assert len(otp) == 6 and otp.isdigit()

    record = user_repo.docs[user["id"]]["reset_otp"]
    assert record["otp_hash"] == hash_otp(otp)
    assert record["attempts"] == 0
    assert record["verified"] is False
    assert record["expires_at"] > datetime.utcnow() + timedelta(minutes=9)


async def test_forget_password_mail_failure(auth_service, user_repo, email_service):
    seed_user(user_repo)
    email_service.succeed = False
    result = await auth_service.forget_password("jane@example.com")
    assert result == {"success": False, "error": "Failed to send OTP email"}


# verify_otp

async def test_verify_otp_without_record_is_invalid_request(auth_service, user_repo):
    seed_user(user_repo)
    result = await auth_service.verify_otp("jane@example.com", "123456")
    assert result == {"success": False, "error": "Invalid request"}


async def test_verify_otp_expired_clears_state(auth_service, user_repo):
    user = seed_user(user_repo, reset_otp=pending_otp(expires_in=-1))
    result = await auth_service.verify_otp("jane@example.com", "123456")
    assert result == {"success": False, "error": "OTP expired"}
    assert "reset_otp" not in user_repo.docs[user["id"]]


async def test_verify_otp_mismatch_increments_attempts(auth_service, user_repo):
    user = seed_user(user_repo, reset_otp=pending_otp(attempts=1))
    result = await auth_service.verify_otp("jane@example.com", "000000")
    assert result == {"success": False, "error": "Invalid OTP"}
    assert user_repo.docs[user["id"]]["reset_otp"]["attempts"] == 2


async def test_verify_otp_clears_state_on_fifth_failure(auth_service, user_repo):
    user = seed_user(user_repo, reset_otp=pending_otp(attempts=4))
    result = await auth_service.verify_otp("jane@example.com", "000000")
    assert result == {"success": False, "error": "Invalid OTP"}
    assert "reset_otp" not in user_repo.docs[user["id"]]


async def test_verify_otp_max_attempts_reached(auth_service, user_repo):
    user = seed_user(user_repo, reset_otp=pending_otp(attempts=5))
    result = await auth_service.verify_otp("jane@example.com", "123456")
    assert result == {"success": False, "error": "Max OTP attempts reached"}
    assert "reset_otp" not in user_repo.docs[user["id"]]


async def test_verify_otp_match_moves_to_verified(auth_service, user_repo):
    user = seed_user(user_repo, reset_otp=pending_otp(attempts=2))
    result = await auth_service.verify_otp("jane@example.com", "123456")
    assert result == {"success": True}

    record = user_repo.docs[user["id"]]["reset_otp"]
    assert record["verified"] is True
    assert record["otp_hash"] is None
    assert record["attempts"] == 0

    # Already verified stays successful
    assert await auth_service.verify_otp("jane@example.com", "999999") == {"success": True}


# reset_password

async def test_reset_password_requires_verified_otp(auth_service, user_repo):
    seed_user(user_repo, reset_otp=pending_otp())
    result = await auth_service.reset_password("jane@example.com", "NewSecret@1")
    assert result == {"success": False, "error": "Invalid request"}


async def test_reset_password_without_any_record(auth_service, user_repo):
    seed_user(user_repo)
    result = await auth_service.reset_password("jane@example.com", "NewSecret@1")
    assert result == {"success": False, "error": "Invalid request"}


async def test_full_reset_flow(auth_service, user_repo, email_service):
    user = seed_user(user_repo)
    await auth_service.forget_password("jane@example.com")
    otp = email_service.sent[0]["otp"]

    assert await auth_service.verify_otp("jane@example.com", otp) == {"success": True}
    assert await auth_service.reset_password("jane@example.com", "NewSecret@1") == {"success": True}

    stored = user_repo.docs[user["id"]]
    assert "reset_otp" not in stored
    assert verify_password("NewSecret@1", stored["password"])
    assert not verify_password("Secret@123", stored["password"])

    login = await auth_service.login("jane@example.com", "NewSecret@1")
    assert login["success"] is True


async def test_reset_password_after_expiry(auth_service, user_repo):
    record = {**pending_otp(expires_in=-1), "otp_hash": None, "verified": True}
    user = seed_user(user_repo, reset_otp=record)
    result = await auth_service.reset_password("jane@example.com", "NewSecret@1")
    assert result == {"success": False, "error": "OTP expired"}
    assert "reset_otp" not in user_repo.docs[user["id"]]
