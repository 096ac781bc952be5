# src/atlas_recipes/core/config/__init__.py
"""
Camada de configuração do Atlas Recipes.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução da configuração final via deep-merge determinístico
    - Normalização e validação de `recipe.options` (RecipeOptions)
    - Hash canônico para rastreabilidade de artefatos

Limites explícitos:
    - Não instancia Steps (ver `atlas_recipes.builders`)
    - Não executa `prepare()` nem `apply()`
"""

from .hashing import compute_config_hash
from .loader import load_config
from .merge import deep_merge
from .options import RecipeOptions, options_from_config

__all__ = [
    "RecipeOptions",
    "compute_config_hash",
    "deep_merge",
    "load_config",
    "options_from_config",
]
