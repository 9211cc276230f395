"""Telegram user session for the watcher: client construction and login.

The watcher runs as a user account because bot accounts never receive
messages posted by other bots, and the results poster is a bot.
"""

from __future__ import annotations

import logging
import os
from getpass import getpass
from typing import Optional

import qrcode
from dotenv import load_dotenv
from telethon import TelegramClient, errors

LOGGER = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "ledger"


def session_path(session_dir: Optional[str] = None) -> str:
    """Return the .session location, kept beside the ledger database."""

    name = os.getenv("SESSION_NAME") or DEFAULT_SESSION_NAME
    if session_dir is None or os.path.isabs(name):
        return name
    return os.path.join(session_dir, name)


def build_client(session_dir: Optional[str] = None) -> TelegramClient:
    """Create a Telethon client from API_ID/API_HASH in .env."""

    load_dotenv()
    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")
    return TelegramClient(session_path(session_dir), int(api_id), api_hash)


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _resolve_2fa_password() -> str:
    password = os.getenv("2FA")
    if password:
        return password
    return getpass("2FA password: ")


async def _authorize_with_qr(client: TelegramClient) -> None:
    qr = await client.qr_login()
    _print_qr(qr.url)
    await qr.wait(timeout=120)


async def _authorize_with_phone(client: TelegramClient) -> None:
    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    code = input("Login code: ").strip()
    await client.sign_in(phone=phone, code=code)


def _pick_login_method() -> str:
    method = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if method in {"qr", "phone"}:
        return method
    choices = {"1": "qr", "2": "phone"}
    while True:
        print("")
        print("Login methods:")
        print("[1] QR code")
        print("[2] Phone code")
        print("[3] Exit")
        choice = input("ledger > ").strip()
        if choice in choices:
            return choices[choice]
        if choice == "3":
            raise SystemExit(0)
        print("Invalid option. Please choose 1, 2, or 3.")


async def authorize(client: TelegramClient) -> None:
    """Log the client in unless the stored session is already authorized."""

    load_dotenv()
    if await client.is_user_authorized():
        return

    try:
        if _pick_login_method() == "phone":
            await _authorize_with_phone(client)
        else:
            await _authorize_with_qr(client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_resolve_2fa_password())

    me = await client.get_me()
    LOGGER.info("Logged in as %s", getattr(me, "username", None) or getattr(me, "id", "unknown"))


async def open_session(client: TelegramClient) -> None:
    """Connect and make sure the user session is authorized."""

    await client.connect()
    await authorize(client)
