"""
Exceções canônicas da camada de configuração do Atlas Recipes.

As exceções aqui definidas representam falhas estruturais ao carregar
ou mesclar arquivos de configuração de recipes (defaults + overrides).
Validação semântica das opções (`recipe.options`) usa `ConfigurationError`
de `atlas_recipes.core.exceptions`.

Invariantes:
    - Todas as exceções de carregamento herdam de `ConfigError`
    - Nenhuma exceção representa erro de Step
"""


class ConfigError(Exception):
    """
    Exceção base para erros de carregamento/merge de configuração.

    Limites explícitos:
        - Não representa erro de execução de Step
        - Não representa opção semanticamente inválida
    """


class DefaultsNotFoundError(ConfigError):
    """O arquivo de defaults é obrigatório e não foi encontrado."""


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato de arquivo não suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """O conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"recipe": {"options": {"retain": true}}}
        - override: {"recipe": {"options": "fast"}}
    """
