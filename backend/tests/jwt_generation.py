import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add parent directory to path so we can import chatline
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import jwt
from chatline.config.settings import Config


def generate_jwt_token(
    user_id: int = 3,
    email: str = "ada@example.com",
    secret: str = Config.JWT_SECRET,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Generate a credential token the way the auth service issues them"""
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=Config.JWT_ALGORITHM)


if __name__ == "__main__":
    user_id = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    print(f"Bearer {generate_jwt_token(user_id)}")
