import sys

from tpm2_tools import TOOL_RC, str_to_uint32, tool_main
from tpm2_tools.encoding import rc_to_yaml


def rc_decode(value):
    # Parse the return code the way the tools parse handle numbers
    try:
        rc = str_to_uint32(value)
    except ValueError as e:
        print(e, file=sys.stderr)
        return TOOL_RC.OPTION_ERROR
    # Print the fields of the return code and its message
    sys.stdout.write(rc_to_yaml(rc))


def main():
    # Usage information
    if len(sys.argv) != 2:
        print(f"Decode a TSS2 return code", file=sys.stderr)
        print(f"", file=sys.stderr)
        print(f"Usage: {sys.argv[0]} rc", file=sys.stderr)
        sys.exit(1)
    sys.exit(tool_main(rc_decode, sys.argv[1]))


if __name__ == "__main__":
    main()
