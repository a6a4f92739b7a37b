"""IdP API façade package.

To use the Flask app:
    from idp_api.flask_app import app

To use the IdP admin client directly:
    from idp_api.core.idp import IdpClient, ClientService
"""
# Note: flask_app is not imported here so the core package stays usable
# without building the WSGI application.
