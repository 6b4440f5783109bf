"""
Zsh command implementation.

Prints a script that keeps PATH pointing at the active build's bin/
directory as the shell changes directory.
"""

ZSH_INTEGRATION = r"""# llvmenv zsh integration
# Add to ~/.zshrc:
#   source <(llvmenv zsh)

_llvmenv_update_path() {
  if [[ -n "$LLVMENV_ACTIVE_BIN" ]]; then
    path=(${path:#$LLVMENV_ACTIVE_BIN})
    unset LLVMENV_ACTIVE_BIN
  fi

  local prefix
  prefix="$(command llvmenv prefix 2>/dev/null)" || return 0
  if [[ -d "$prefix/bin" ]]; then
    export LLVMENV_ACTIVE_BIN="$prefix/bin"
    path=("$LLVMENV_ACTIVE_BIN" $path)
  fi
}

autoload -Uz add-zsh-hook
add-zsh-hook chpwd _llvmenv_update_path
_llvmenv_update_path
"""


def run(args) -> int:
    """
    Run the zsh command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (always 0)
    """
    print(ZSH_INTEGRATION, end="")
    return 0
