import asyncio
import logging
import sys

from lockbox.app.db import init_models

logging.basicConfig(level=logging.INFO)

if __name__ == "__main__":
    # --reset: drop existing tables first (DEV ONLY, destroys every lockbox)
    reset = "--reset" in sys.argv[1:]
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(init_models(drop=reset))
    print(">>> Tables Created Successfully!")
