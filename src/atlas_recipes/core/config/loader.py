"""
Loader canônico de configuração de recipes.

A configuração efetiva de uma recipe é resolvida a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

Estrutura esperada (exemplo YAML):

recipe:
  options:
    retain: true
    strings_as_factors: true
    unseen_categories: error
  roles:
    y: outcome
  steps:
    - type: step_impute_median
      terms: ["all_numeric_predictors()"]
    - type: step_center
      terms: ["all_numeric_predictors()"]

Limites explícitos:
    - Não valida semântica (responsabilidade de `options_from_config`
      e do builder de recipes)
    - Não instancia Steps
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo YAML/JSON e garante que a raiz seja um dicionário.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(f"Config root deve ser dict, recebido: {type(data).__name__}")

    return data


def load_config(
    *,
    defaults_path: Union[str, Path],
    local_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva de uma recipe.

    Política de resolução:
        - defaults é obrigatório
        - local é opcional e ignorado quando o arquivo não existe
        - quando presente, local tem prioridade (deep-merge)

    Args:
        defaults_path: Caminho para o arquivo de defaults.
        local_path: Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida.
    """
    effective = _load_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective
