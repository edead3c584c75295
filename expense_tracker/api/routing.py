"""
Route class for endpoints that accept money in JSON bodies.

JSON numbers are read as Decimal from their literal text, so an amount like
1234567890123456.78 reaches validation unchanged instead of passing through
a binary float first.
"""

import json
from decimal import Decimal
from typing import Any, Callable

from fastapi import Request, Response
from fastapi.routing import APIRoute


class DecimalJSONRequest(Request):
    
    async def json(self) -> Any:
        if not hasattr(self, "_json"):
            self._json = json.loads(await self.body(), parse_float=Decimal)
        return self._json


class DecimalJSONRoute(APIRoute):
    """APIRoute whose handler parses request bodies with Decimal floats"""
    
    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()
        
        async def decimal_route_handler(request: Request) -> Response:
            request = DecimalJSONRequest(request.scope, request.receive)
            return await original_route_handler(request)
        
        return decimal_route_handler
