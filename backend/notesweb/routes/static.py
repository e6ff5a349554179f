"""
Notes Web — Stylesheet Serving
===============================

What:  Serves the stylesheets under /static.
How:   A StaticFiles subclass that answers 404 for anything that is not a
       .css file, before touching the filesystem. Missing files are also
       404 (the StaticFiles default).
"""

from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

ALLOWED_SUFFIXES = (".css",)


class StylesheetFiles(StaticFiles):
    """StaticFiles restricted to stylesheets."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        if not path.lower().endswith(ALLOWED_SUFFIXES):
            raise HTTPException(status_code=404)
        return await super().get_response(path, scope)
