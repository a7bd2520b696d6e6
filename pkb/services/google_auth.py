"""Google Drive + Gmail OAuth2 (installed-app flow). Run: pkb auth"""

from pathlib import Path

from google_auth_oauthlib.flow import InstalledAppFlow

from pkb.core.config import config
from pkb.services.google_service import SCOPES, save_token

MISSING_CREDENTIALS_HELP = (
    "Google credentials not configured.\n\n"
    "Set these environment variables (or add them to .env):\n"
    '  export PKB_GOOGLE_CLIENT_ID="your-client-id"\n'
    '  export PKB_GOOGLE_CLIENT_SECRET="your-client-secret"\n\n'
    "Create them in Google Cloud Console > APIs & Services > Credentials > "
    "OAuth 2.0 Client ID (Desktop)."
)


def run_google_auth() -> int:
    if not config.has_google_credentials:
        print(MISSING_CREDENTIALS_HELP)
        return 1

    client_config = {
        "installed": {
            "client_id": config.google_client_id,
            "client_secret": config.google_client_secret,
            "redirect_uris": [f"http://localhost:{config.oauth_port}/"],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    }

    flow = InstalledAppFlow.from_client_config(client_config, scopes=SCOPES)
    print("Opening browser for Google authorization...")
    try:
        creds = flow.run_local_server(port=config.oauth_port)
    except Exception as e:
        print(f"Authorization failed: {e}")
        return 1

    path: Path = config.token_path
    save_token(path, creds)
    print(f"Token saved to {path}")
    print("You can now search: pkb search <query>")
    return 0
