"""
Request handling for agents receiving calls from the Tetto platform.

The platform POSTs ``{"input": {...}, "tetto_context": {...}}`` to an agent's
endpoint_url. AgentHandler turns that body into a call to user code and maps
the outcome to a JSON body and status code:

    200  the handler's return value, unchanged
    400  body is not JSON or has no ``input``
    500  ``{"error": str(exc)}`` for anything the handler raised

An unreadable ``tetto_context`` is logged and passed on as None.
"""
import asyncio
import inspect
import json
import logging
from typing import Any, Callable, Dict, Tuple, Union

from flask import jsonify, request
from pydantic import ValidationError

from ..context import AgentRequestContext, parse_tetto_context

logger = logging.getLogger(__name__)

Body = Union[bytes, str, Dict[str, Any], None]


def _accepts_context(handler: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return True
    positional = 0
    for parameter in parameters:
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


class AgentHandler:
    """
    Wraps ``handler(input)`` or ``handler(input, context)``.

    Handlers may be plain or ``async`` functions. The wrapper never raises:
    every failure becomes an error response, so one bad request does not
    affect the next.
    """

    def __init__(self, handler: Callable[..., Any]):
        self.handler = handler
        self._pass_context = _accepts_context(handler)

    def __call__(self, body: Body) -> Tuple[Any, int]:
        """
        Handle one request body.

        Args:
            body: Raw request body, or an already-parsed JSON object

        Returns:
            (response_body, status_code)
        """
        if isinstance(body, (bytes, str)):
            try:
                body = json.loads(body)
            except ValueError:
                return {"error": "Invalid JSON in request body"}, 400

        if not isinstance(body, dict) or body.get("input") is None:
            return {"error": "Missing 'input' field in request body"}, 400

        try:
            tetto_context = parse_tetto_context(body.get("tetto_context"))
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable tetto_context: {e.error_count()} validation error(s)")
            tetto_context = None

        context = AgentRequestContext(tetto_context=tetto_context)
        try:
            if self._pass_context:
                output = self.handler(body["input"], context)
            else:
                output = self.handler(body["input"])
            if inspect.isawaitable(output):
                output = asyncio.run(_await(output))
        except Exception as e:
            logger.error(f"Agent error: {e}")
            return {"error": str(e)}, 500

        return output, 200

    def as_flask_view(self) -> Callable[[], Any]:
        """Adapt this handler to a Flask view function."""
        def view():
            body, status = self(request.get_data())
            return jsonify(body), status

        view.__name__ = getattr(self.handler, "__name__", "agent_handler")
        return view


async def _await(awaitable: Any) -> Any:
    return await awaitable


def create_agent_handler(handler: Callable[..., Any]) -> AgentHandler:
    """
    Create a request handler for an agent.

    Example:
        def summarize(input, context):
            if context.tetto_context is not None:
                logger.info(f"Called by {context.caller_agent_id or 'a user'}")
            return {"summary": input["text"][:100]}

        app = Flask(__name__)
        register_agent_route(app, "/api/summarize", summarize)
    """
    return AgentHandler(handler)


def register_agent_route(app: Any, rule: str, handler: Callable[..., Any]) -> AgentHandler:
    """
    Mount an agent handler on a Flask app as a POST route.

    Returns:
        The AgentHandler, so it can also be called directly in tests
    """
    agent_handler = handler if isinstance(handler, AgentHandler) else create_agent_handler(handler)
    app.add_url_rule(rule, endpoint=rule, view_func=agent_handler.as_flask_view(), methods=["POST"])
    return agent_handler
