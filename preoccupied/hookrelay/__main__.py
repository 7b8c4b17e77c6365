"""
Run the hookrelay service under uvicorn.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

import uvicorn

from .config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run('preoccupied.hookrelay.app:app', host=config.host, port=config.port)


if __name__ == '__main__':
    main()


# The end.
