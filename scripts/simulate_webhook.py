"""Post sample hazard reports to a running server as Twilio would.

Signs each request with TWILIO_AUTH_TOKEN (when set) so the webhook's
signature check passes, then prints the stored reports.

Usage:
    TWILIO_AUTH_TOKEN=... python scripts/simulate_webhook.py --base-url http://localhost:3000
"""

import argparse
import sys
import uuid
from pathlib import Path

import httpx

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import get_settings
from app.services.twilio_auth import SIGNATURE_HEADER, compute_signature

SAMPLE_MESSAGES = [
    ("+15550100001", "Flooding near Marina Beach, urgent help needed"),
    ("whatsapp:+15550100002", "storm warning at Port Blair"),
    ("+15550100003", "Minor high waves in Kovalam"),
    ("whatsapp:+15550100004", "Tsunami surge reported near Puri. Emergency!"),
    ("+15550100005", "Something strange on the shore"),
]


def post_message(client: httpx.Client, url: str, sign_url: str, token: str, sender: str, body: str) -> int:
    params = {
        "From": sender,
        "Body": body,
        "MessageSid": "SM" + uuid.uuid4().hex,
        "NumMedia": "0",
    }
    headers = {}
    if token:
        headers[SIGNATURE_HEADER] = compute_signature(token, sign_url, params)
    resp = client.post(url, data=params, headers=headers)
    return resp.status_code


def main():
    parser = argparse.ArgumentParser(description="Simulate inbound Twilio messages")
    parser.add_argument("--base-url", default="http://localhost:3000")
    args = parser.parse_args()

    settings = get_settings()
    url = f"{args.base_url}/api/twilio/incoming-sms"
    sign_url = settings.twilio_webhook_url or url

    with httpx.Client(timeout=60.0) as client:
        for sender, body in SAMPLE_MESSAGES:
            status = post_message(client, url, sign_url, settings.twilio_auth_token, sender, body)
            print(f"  {status}  {sender:<24} {body}")

        data = client.get(f"{args.base_url}/api/reports").json()
        print(f"\n{data['count']} report(s) stored")
        for r in data["reports"][: len(SAMPLE_MESSAGES)]:
            print(f"  {r['id']}  {r['hazardType']:<7} {r['urgency']:<6} {r['location']}")


if __name__ == "__main__":
    main()
