#!/usr/bin/env python3
"""
Generation Gateway FastAPI Server Startup Script

This script starts the FastAPI server with proper configuration
and provides helpful startup information.
"""

import os
import sys
from pathlib import Path

from core.config import CREDENTIAL_ENV_VARS, load_config


def check_dependencies() -> bool:
    """Check if required dependencies are installed"""
    required_packages = ['fastapi', 'uvicorn', 'pydantic', 'openai', 'anthropic', 'google.generativeai']
    missing_packages = []

    for package in required_packages:
        try:
            __import__(package)
        except ImportError:
            missing_packages.append(package)

    if missing_packages:
        print(f"Error: Missing required packages: {', '.join(missing_packages)}")
        print("Install them with: pip install -e .")
        return False

    return True


def check_config_file(config_file: str) -> bool:
    """Check configuration and report which providers have credentials"""
    config_path = Path(config_file)
    if config_path.exists():
        print(f"Configuration file found: {config_path}")
    else:
        print(f"No configuration file at {config_path}; using environment variables only")

    try:
        config = load_config(config_file)
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}")
        return False

    configured = [key for key in CREDENTIAL_ENV_VARS if getattr(config.credentials, key)]
    if not configured:
        print("Warning: No provider credentials found; every model will be unavailable")
        print(f"Set one of: {', '.join(CREDENTIAL_ENV_VARS.values())}")
    else:
        print(f"Credentials found for: {', '.join(key.replace('_api_key', '') for key in configured)}")
    return True


def main():
    """Main startup routine"""
    print("Starting Generation Gateway FastAPI Server")
    print("=" * 40)

    print(f"Working directory: {Path.cwd()}")

    print("\nChecking Dependencies...")
    if not check_dependencies():
        sys.exit(1)
    print("All dependencies are available")

    print("\nChecking Configuration...")
    config_file = os.getenv("GATEWAY_CONFIG", "config.ini")
    if not check_config_file(config_file):
        sys.exit(1)

    # Server configuration
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "true").lower() == "true"
    log_level = os.getenv("LOG_LEVEL", "info")

    print("\nServer Configuration:")
    print(f"  • Host: {host}")
    print(f"  • Port: {port}")
    print(f"  • Reload: {reload}")
    print(f"  • Log Level: {log_level}")

    print("\nAPI Endpoints will be available at:")
    print(f"  • Generate: http://{host}:{port}/api/generate")
    print(f"  • Health:   http://{host}:{port}/health")
    print(f"  • Config:   http://{host}:{port}/config")
    print(f"  • Docs:     http://{host}:{port}/docs")

    print("\nStarting server...")
    print("=" * 40)

    try:
        import uvicorn
        uvicorn.run(
            "fastapi_app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level
        )
    except KeyboardInterrupt:
        print("\n\nServer stopped by user")
    except Exception as e:
        print(f"\n\nError: Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
