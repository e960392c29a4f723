#!/usr/bin/env python3
"""
📖 Quran Cite: Telegram Bot
Send a line of Arabic transcript → get the verse it recites, if any.
"""
import asyncio
import html
import logging
import os
import sys

import httpx
from aiogram import Bot, Dispatcher, F, types
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandStart

# ── Config ──────────────────────────────────────────
API_URL = os.environ.get("QURAN_API_URL", "http://localhost:7860")
TOKEN_FILE = os.path.join(os.path.dirname(__file__), ".bot-token")

log = logging.getLogger(__name__)
dp = Dispatcher()


def load_token():
    token = os.environ.get("QURAN_BOT_TOKEN", "").strip()
    if not token and os.path.exists(TOKEN_FILE):
        with open(TOKEN_FILE) as f:
            token = f.read().strip()
    return token


# ── Handlers ────────────────────────────────────────

@dp.message(CommandStart())
async def cmd_start(message: types.Message):
    await message.answer(
        "📖 *Quran Cite*\n\n"
        "Send me Arabic text from a khutbah or lecture transcript "
        "and I'll tell you if it recites a verse of the Quran, and which one.",
        parse_mode=ParseMode.MARKDOWN
    )


@dp.message(Command("help"))
async def cmd_help(message: types.Message):
    await message.answer(
        "📖 *How to use Quran Cite:*\n\n"
        "1️⃣ Paste a few words of Arabic (at least two)\n"
        "2️⃣ I'll search the Quran and reply with:\n"
        "   • Surah name & ayah (or ayah range)\n"
        "   • How confident the match is\n\n"
        "Short or common phrases are ignored on purpose.",
        parse_mode=ParseMode.MARKDOWN
    )


@dp.message(F.text)
async def handle_text(message: types.Message):
    """Forward transcript text to the API and reply with the citation"""
    try:
        async with httpx.AsyncClient(timeout=15) as client:
            resp = await client.post(f"{API_URL}/match", json={"text": message.text})

        if resp.status_code != 200:
            await message.answer("❌ Server error. Please try again.")
            return

        await message.answer(format_response(resp.json()), parse_mode=ParseMode.HTML)

    except httpx.HTTPError as e:
        log.warning("API request failed: %s", e)
        await message.answer(f"❌ Error: {str(e)[:200]}")


def format_response(data: dict) -> str:
    """Format the /match response for Telegram"""
    lines = [f"🎙 <b>Heard:</b> <i>{html.escape(data.get('text', ''))}</i>", ""]

    ref = data.get("verse_reference")
    if not ref:
        lines.append("🔍 No Quran verse detected.")
        return "\n".join(lines)

    score_pct = int(ref["confidence"] * 100)
    badge = "🟢" if score_pct >= 80 else "🟡" if score_pct >= 50 else "🔴"

    lines.append(f"📖 <b>{html.escape(ref['reference'])}</b> {badge} {score_pct}%")
    run = ref.get("longestConsecutiveRun", 0)
    if run:
        lines.append(f"<i>{run} consecutive words matched</i>")
    return "\n".join(lines)


async def main():
    token = load_token()
    if not token:
        print("ERROR: Set QURAN_BOT_TOKEN env var or create .bot-token file")
        sys.exit(1)

    logging.basicConfig(level=logging.INFO)
    print("📖 Quran Cite Bot starting...")
    print(f"   API: {API_URL}")
    await dp.start_polling(Bot(token=token))


if __name__ == "__main__":
    asyncio.run(main())
