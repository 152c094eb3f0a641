"""Error formatting for CLI output."""

from revclone.exceptions import GitCloneFailed


def pretty_print_clone_error(error: Exception) -> str:
    """Format a clone failure together with the chain of errors behind it.

    Args:
        error: The exception to format, usually a GitCloneFailed

    Returns:
        A multi-line message, the outermost error first

    Example output:
        Git clone from https://github.com/user/repo failed
          caused by: Revision not found: v9.9.9
    """
    message_parts = [str(error)]

    cause = error.__cause__
    seen = {id(error)}
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        message_parts.append(f"  caused by: {cause}")
        cause = cause.__cause__

    if isinstance(error, GitCloneFailed) and len(message_parts) == 1:
        message_parts.append("  caused by: unknown error")

    return "\n".join(message_parts)
