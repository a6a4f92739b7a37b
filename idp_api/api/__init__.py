"""HTTP surface: blueprints, decorators and error handlers."""
