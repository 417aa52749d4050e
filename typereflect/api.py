"""
Flask-based Web API for TypeReflect.

Provides REST endpoints for rendering importable classes as pseudo-source.

Endpoints:
    POST /api/render - Render a class in a target syntax
    GET /api/languages - List available target syntaxes
    GET /api/health - Health check endpoint
"""

import logging
from typing import Any

from flask import Flask, Response, jsonify, request

from typereflect import __version__
from typereflect.profiles import create_profile_registry
from typereflect.renderer import RenderOptions, render_tree
from typereflect.walker import TypeWalker, resolve_type

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Request switches and their defaults; each must be a JSON boolean
BOOLEAN_FIELDS = {
    "instantiate": False,
    "public_only": False,
    "probe_values": True,
    "invoke_methods": True,
    "include_pseudo_attributes": True,
}


def render_class(
    type_spec: str,
    language: str,
    options: RenderOptions,
    instantiate: bool = False,
    public_only: bool = False,
) -> dict[str, Any]:
    """
    Resolve, walk and render a class.

    Args:
        type_spec: Class specification (module:QualName)
        language: Profile name or alias
        options: Rendering options
        instantiate: Construct the class to obtain a live instance
        public_only: Skip private and protected members

    Returns:
        Dict with the rendered blocks, the joined text and any warnings

    Raises:
        ValueError: If the type or language cannot be resolved
    """
    profile = create_profile_registry().get(language)
    cls = resolve_type(type_spec)

    warnings = []
    instance = None
    if instantiate:
        try:
            instance = cls()
        except Exception as e:
            warnings.append(f"Could not instantiate {cls.__name__}: {e}")

    tree = TypeWalker(include_private=not public_only).walk(cls)
    blocks = render_tree(tree, profile, instance, options)

    return {
        "type": tree.type.full_name,
        "language": profile.name,
        "blocks": blocks,
        "text": "\n".join(blocks),
        "warnings": warnings,
    }


@app.route("/api/health", methods=["GET"])
def health_check() -> Response:
    """Health check endpoint."""
    return jsonify({"status": "healthy", "version": __version__})


@app.route("/api/languages", methods=["GET"])
def list_languages() -> Response:
    """List registered profiles with their aliases."""
    profiles = create_profile_registry().get_profiles()
    return jsonify({
        "languages": [
            {"name": p.name, "aliases": list(p.aliases)}
            for p in profiles
        ]
    })


@app.route("/api/render", methods=["POST"])
def render() -> tuple[Response, int]:
    """
    Render a class as pseudo-source.

    Request JSON:
        - type: str, module:QualName (required)
        - language: str (default: "csharp")
        - instantiate: bool (default: false)
        - public_only: bool (default: false)
        - probe_values: bool (default: true)
        - invoke_methods: bool (default: true)
        - include_pseudo_attributes: bool (default: true)

    Returns:
        JSON response with:
            - blocks: One string per rendered construct
            - text: The blocks joined by newlines
            - warnings: Any non-fatal problems
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    type_spec = data.get("type")
    if not type_spec:
        return jsonify({"error": "'type' is required"}), 400
    if not isinstance(type_spec, str):
        return jsonify({"error": "'type' must be a string"}), 400

    language = data.get("language", "csharp")
    if not isinstance(language, str):
        return jsonify({"error": "'language' must be a string"}), 400

    flags = {}
    for name, default in BOOLEAN_FIELDS.items():
        value = data.get(name, default)
        if not isinstance(value, bool):
            return jsonify({"error": f"'{name}' must be true or false"}), 400
        flags[name] = value

    options = RenderOptions(
        probe_values=flags["probe_values"],
        invoke_methods=flags["invoke_methods"],
        include_pseudo_attributes=flags["include_pseudo_attributes"],
    )

    try:
        result = render_class(
            type_spec,
            language,
            options,
            instantiate=flags["instantiate"],
            public_only=flags["public_only"],
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Rendering %s failed", type_spec)
        return jsonify({"error": f"Rendering failed: {str(e)}"}), 500

    return jsonify({"success": True, **result}), 200


@app.errorhandler(500)
def internal_server_error(error):
    """Handle internal server errors."""
    return jsonify({"error": "Internal server error"}), 500


def create_app() -> Flask:
    """
    Application factory for creating the Flask app.

    Returns:
        Configured Flask application instance.
    """
    return app


def main() -> None:
    """Run the development server."""
    print("Starting TypeReflect API server...")
    print()
    print("API Endpoints:")
    print("  POST /api/render    - Render a class as pseudo-source")
    print("  GET  /api/languages - List target syntaxes")
    print("  GET  /api/health    - Health check")
    print()
    app.run(host="127.0.0.1", port=5001, debug=False)


if __name__ == "__main__":
    main()
