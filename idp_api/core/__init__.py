"""Core logic of the IdP API façade, independent of Flask.

Module Structure:
    - idp/                   : Low-level IdP admin API client
    - negotiator.py          : Caller and admin token negotiation
    - authorization.py       : Secret-gated authorization for update/delete
    - client_provisioning.py : Ordered create/update/delete orchestration
    - validators.py          : Inbound client definition decoding
    - errors.py              : Versioned error vocabulary (ApiError)

Import explicitly when needed:
    from idp_api.core.client_provisioning import ClientProvisioningService
    from idp_api.core.errors import ApiError
"""
