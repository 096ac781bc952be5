"""
Deep-merge de configuração de recipes.

Política de merge (v1):
    - dict    → merge recursivo por chave
    - list    → sobrescrita total (ex.: `recipe.steps` nunca é mesclado item a item)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada sempre produz a mesma saída
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any], _path: str = "") -> Dict[str, Any]:
    """
    Mescla `override` sobre `base` retornando um novo dicionário.

    A lista de Steps de uma recipe é tratada como unidade: um override
    que declara `recipe.steps` substitui a sequência inteira, pois a
    ordem dos Steps é parte do significado da recipe.

    Args:
        base (Dict[str, Any]): Configuração base (defaults).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova configuração resolvida.

    Raises:
        ConfigTypeConflictError: Se a mesma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts em '{_path or '<root>'}', recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    merged: Dict[str, Any] = deepcopy(base)

    for key, new in override.items():
        path = f"{_path}.{key}" if _path else str(key)
        if key not in merged:
            merged[key] = deepcopy(new)
            continue

        old = merged[key]
        if isinstance(old, dict) and isinstance(new, dict):
            merged[key] = deep_merge(old, new, path)
        elif isinstance(new, list) or old is None or new is None:
            merged[key] = deepcopy(new)
        elif type(old) is not type(new):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{path}': "
                f"{type(old).__name__} vs {type(new).__name__}"
            )
        else:
            merged[key] = deepcopy(new)

    return merged
