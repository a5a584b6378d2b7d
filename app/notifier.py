import logging

import httpx

logger = logging.getLogger("cryptogram")


async def send_notification(
    ciphertext: str,
    solutions: list[str],
    timings: dict,
    topic: str,
    ntfy_url: str = "https://ntfy.sh",
    limit: int = 10,
    transport: httpx.AsyncBaseTransport | None = None,
):
    """Send solve results to ntfy.sh. Best-effort: failures are logged, not raised."""
    try:
        title = f"Cryptogram - {len(solutions)} solution{'' if len(solutions) == 1 else 's'}"

        shown = solutions[:limit] if limit > 0 else solutions
        lines = [ciphertext, ""] + shown
        if len(shown) < len(solutions):
            lines.append(f"... and {len(solutions) - len(shown)} more")
        lines.append("")
        lines.append(f"{timings.get('total', 0)} ms")
        body = "\n".join(lines)

        async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
            resp = await client.post(
                f"{ntfy_url}/{topic}",
                content=body.encode("utf-8"),
                headers={
                    "Title": title,
                    "Priority": "default",
                    "Tags": "key",
                },
            )
            resp.raise_for_status()
            logger.info("Notification sent to %s/%s (status %d)", ntfy_url, topic, resp.status_code)

    except Exception as e:
        logger.error("Failed to send notification: %s", e)
