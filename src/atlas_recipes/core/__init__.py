# src/atlas_recipes/core/__init__.py
"""
Core do Atlas Recipes.

Componentes principais:
    - config       → carregamento, merge, hashing e opções de recipe
    - recipe       → metadados, seletores, contrato de Step e ciclo de vida
    - traceability → Event Log estruturado
    - exceptions / errors → exceções tipadas e payloads serializáveis

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Nenhum estado global de processo
"""
