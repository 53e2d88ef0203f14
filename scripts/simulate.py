"""
Storefront Load Simulation Script

Opens many support chat panels concurrently, sends customer questions,
waits for the bot replies, and fires order status events.
Run from project root (API on :8001): python scripts/simulate.py

Version: 1.0.0
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any

import httpx

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_SESSIONS = 50
REPLY_TIMEOUT = 10.0

# Sample data for random conversations
CUSTOMER_QUESTIONS = [
    "Hello!",
    "What's on the menu?",
    "Where is my order?",
    "How long does delivery take?",
    "How much is the chicken biryani?",
    "Do you accept UPI?",
    "Can I get it extra spicy?",
    "What are your opening hours?",
    "My order was wrong",
    "Thanks a lot!",
    "Do you have parking?",
]
FIRST_NAMES = ["Aarav", "Diya", "Ishaan", "Ananya", "Kabir", "Meera", "Rohan", "Sara"]
STATUSES = ["confirmed", "preparing", "ready", "out_for_delivery", "delivered", "cancelled"]


# =============================================================================
# CHAT SIMULATION
# =============================================================================

async def wait_for_bot_reply(
    client: httpx.AsyncClient,
    session_id: str,
    expected_messages: int,
) -> list[dict]:
    """Poll the panel until the bot reply lands."""
    deadline = time.time() + REPLY_TIMEOUT
    while time.time() < deadline:
        response = await client.get(f"{API_BASE_URL}/api/chat/sessions/{session_id}")
        response.raise_for_status()
        data = response.json()
        if not data["typing"] and len(data["messages"]) >= expected_messages:
            return data["messages"]
        await asyncio.sleep(0.2)
    raise TimeoutError(f"No reply in session {session_id} after {REPLY_TIMEOUT}s")


async def run_chat_session(
    client: httpx.AsyncClient,
    session_num: int,
    questions_per_session: int = 3,
) -> dict[str, Any]:
    """Open a panel, ask a few questions, close it."""
    start_time = time.time()

    try:
        response = await client.post(f"{API_BASE_URL}/api/chat/sessions")
        response.raise_for_status()
        session_id = response.json()["sessionId"]

        messages: list[dict] = []
        for question in random.sample(CUSTOMER_QUESTIONS, questions_per_session):
            response = await client.post(
                f"{API_BASE_URL}/api/chat/sessions/{session_id}/messages",
                json={"text": question},
            )
            response.raise_for_status()
            messages = await wait_for_bot_reply(client, session_id, len(messages) + 2)

        await client.delete(f"{API_BASE_URL}/api/chat/sessions/{session_id}")

        senders = [m["sender"] for m in messages]
        ordered = senders == ["user", "bot"] * questions_per_session
        return {
            "session_num": session_num,
            "success": ordered,
            "messages": len(messages),
            "time": round(time.time() - start_time, 3),
            "mode": "chat",
            "error": None if ordered else f"Unexpected transcript order: {senders}",
        }
    except (httpx.HTTPError, TimeoutError) as e:
        return {
            "session_num": session_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
            "mode": "chat",
        }


# =============================================================================
# STATUS EVENT SIMULATION
# =============================================================================

def generate_status_event(order_num: int) -> dict[str, Any]:
    """Generate payload for /api/orders/status-events."""
    name = random.choice(FIRST_NAMES)
    return {
        "customerName": name,
        "customerEmail": f"{name.lower()}@example.com",
        "customerPhone": f"+9198{random.randint(10000000, 99999999)}",
        "orderNumber": f"SB-{10000 + order_num}",
        "status": random.choice(STATUSES),
    }


async def send_status_event(
    client: httpx.AsyncClient,
    order_num: int,
) -> dict[str, Any]:
    """Send one order status change event."""
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/orders/status-events",
            json=generate_status_event(order_num),
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)
        if response.status_code == 202:
            return {"session_num": order_num, "success": True, "time": elapsed, "mode": "status"}
        return {
            "session_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
            "mode": "status",
        }
    except httpx.HTTPError as e:
        return {
            "session_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
            "mode": "status",
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(
    mode: str = "both",
    num_sessions: int = TOTAL_SESSIONS,
) -> dict[str, Any]:
    """
    Run the load simulation.

    Args:
        mode: "chat", "status", or "both"
        num_sessions: Number of chat sessions / status events
    """
    print("=" * 70)
    print("🔥 STOREFRONT SIMULATION")
    print("=" * 70)
    print(f"📋 Sessions: {num_sessions}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"🔧 Mode: {mode}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(timeout=30.0) as client:
        tasks = []
        for i in range(num_sessions):
            if mode in ("chat", "both"):
                tasks.append(run_chat_session(client, i + 1))
            if mode in ("status", "both"):
                tasks.append(send_status_event(client, i + 1))
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful: {len(successful)}/{len(results)}")
    print(f"❌ Failed: {len(failed)}/{len(results)}")
    print(f"⏱️  Total Time: {total_time}s")

    for label in ("chat", "status"):
        subset = [r for r in results if r["mode"] == label]
        if subset:
            ok = len([r for r in subset if r["success"]])
            print(f"   {label}: {ok}/{len(subset)} successful")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"\n📈 Average duration: {avg_time}s")

    if failed:
        print("\n⚠️  Failures (showing first 5):")
        for f in failed[:5]:
            print(f"   #{f['session_num']} [{f['mode']}]: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": len(results),
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health() -> bool:
    """Pre-flight: the API must be reachable."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"   ❌ API unreachable: {e}")
            return False
    data = response.json()
    print(f"   ✅ Status: {data.get('status')}")
    print(f"   Redis: {data.get('redis')}")
    print(f"   Notifications: {data.get('notifications')}")
    return response.status_code == 200


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Storefront Simulation Script")
    parser.add_argument("--chat", action="store_true", help="Chat sessions only")
    parser.add_argument("--status", action="store_true", help="Status events only")
    parser.add_argument("--sessions", type=int, default=TOTAL_SESSIONS, help="Number of sessions")
    args = parser.parse_args()

    if args.chat:
        mode = "chat"
    elif args.status:
        mode = "status"
    else:
        mode = "both"

    if not asyncio.run(check_health()):
        print("\n❌ Pre-flight check failed. Start the API first.")
        sys.exit(1)

    summary = asyncio.run(run_simulation(mode=mode, num_sessions=args.sessions))
    sys.exit(0 if summary["failed"] == 0 else 1)
