from . import occ_engine as occ

__all__ = ['occ']

ENGINE_REGISTRY = {'occ': occ}


def get_engine(name: str):
    return ENGINE_REGISTRY.get(name)


__all__.extend(['ENGINE_REGISTRY', 'get_engine'])
