from kubectl_duck_hunter.tools.ducks import register_duck_tools

__all__ = ["register_duck_tools"]
