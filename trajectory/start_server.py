#!/usr/bin/env python3
"""
Server startup wrapper - runs the Trajectory API under uvicorn
"""
import os
import sys


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    print("[Trajectory] Starting momentum service")
    print(f"[Trajectory] Server: http://{host}:{port}")
    print("[Trajectory] Press CTRL+C to stop")
    print()

    try:
        import uvicorn

        uvicorn.run(
            "trajectory.main:app",
            host=host,
            port=port,
            reload=False,
            log_level="info",
            access_log=True,
        )
    except KeyboardInterrupt:
        print("\n[Trajectory] Shutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main()
