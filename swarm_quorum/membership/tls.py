import ssl

from swarm_quorum.errors import SetupError


def create_client_ssl_context(
    ca_path: str,
    cert_path: str,
    key_path: str,
) -> ssl.SSLContext:
    """Build the mutual-TLS context used to query the orchestration API."""
    try:
        ssl_ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        ssl_ctx.options |= ssl.OP_NO_TLSv1
        ssl_ctx.options |= ssl.OP_NO_TLSv1_1
        ssl_ctx.load_verify_locations(cafile=ca_path)
        ssl_ctx.load_cert_chain(cert_path, keyfile=key_path)
        ssl_ctx.verify_mode = ssl.VerifyMode.CERT_REQUIRED

    except (OSError, ssl.SSLError) as err:
        raise SetupError(
            "Failed to load TLS certificates",
            cause=err,
            ca_path=ca_path,
            cert_path=cert_path,
            key_path=key_path,
        ) from err

    return ssl_ctx
