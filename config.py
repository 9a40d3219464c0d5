"""
Configuration management for Spellbook.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for Spellbook."""

    # Gemini credential
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

    # Server
    PORT = int(os.getenv("PORT", "8080"))

    # LLM Backend Configuration
    LLM_BACKEND = os.getenv("LLM_BACKEND", "gemini")

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        if cls.LLM_BACKEND == "stub":
            return True

        required = ["GEMINI_API_KEY"]
        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            print(f"⚠️  Missing required environment variables: {', '.join(missing)}")
            print(f"   Please set them in .env file")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Gemini API Key: {'✓ Set' if Config.GEMINI_API_KEY else '✗ Missing'}")
    print(f"  Port: {Config.PORT}")
    print(f"  LLM Backend: {Config.LLM_BACKEND}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
