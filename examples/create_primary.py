import sys

from tpm2_pytss import TPM2B_SENSITIVE_CREATE

from tpm2_tools import (
    HierarchyPData,
    PasswordSession,
    config,
    hierarchy_create_primary,
    hierarchy_from_optarg,
    tool_main,
)
from tpm2_tools.backend import ESAPIBackend
from tpm2_tools.encoding import primary_to_yaml


def create_primary(hierarchy, auth):
    # Accept any hierarchy name, prefix or handle number
    objdata = HierarchyPData(hierarchy_from_optarg(hierarchy))
    objdata.in_sensitive = TPM2B_SENSITIVE_CREATE()
    # Connect to the configured TCTI, translating ESAPI errors
    with ESAPIBackend() as ectx:
        hierarchy_create_primary(ectx, PasswordSession(auth), objdata)
        try:
            sys.stdout.write(primary_to_yaml(objdata))
        finally:
            # The example does not persist the object
            ectx.flush_context(objdata.out.handle)
            objdata.free()


def main():
    # Usage information
    if len(sys.argv) not in (1, 2, 3):
        print(f"Create a primary RSA key under a hierarchy", file=sys.stderr)
        print(f"", file=sys.stderr)
        print(f"Usage: {sys.argv[0]} [hierarchy] [auth]", file=sys.stderr)
        sys.exit(1)
    hierarchy = sys.argv[1] if len(sys.argv) > 1 else config.HIERARCHY
    auth = sys.argv[2] if len(sys.argv) > 2 else ""
    sys.exit(tool_main(create_primary, hierarchy, auth))


if __name__ == "__main__":
    main()
