"""Parameter name to environment variable name conversion."""


def to_env_var_name(name: str) -> str:
    """Convert a mixed-case name to an upper snake case variable name.

    Every uppercase letter after the first character gets its own
    separator, so runs of capitals are not collapsed::

        >>> to_env_var_name("serverName")
        'SERVER_NAME'
        >>> to_env_var_name("HTTPServer")
        'H_T_T_P_SERVER'

    Environment variable names read by injected scripts are derived from
    this exact behaviour.
    """
    result = []
    for i, char in enumerate(name):
        if i > 0 and "A" <= char <= "Z":
            result.append("_")
        result.append(char)
    return "".join(result).upper()
