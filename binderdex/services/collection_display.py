"""Display title and subtitle of a binder."""

from binderdex.models.collection import BinderType, Collection
from binderdex.services.species_expansion import VARIATION_GROUPS


def is_grandmaster(collection: Collection) -> bool:
    """A master binder with every expansion enabled."""
    if collection.type not in (BinderType.MASTER_SET, BinderType.MASTER_DEX):
        return False
    opts = collection.config.master_set_options
    if opts is None:
        return False
    all_variations = opts.variations or len(opts.variation_groups or ()) == len(VARIATION_GROUPS)
    return opts.regional_forms and all_variations and opts.megas and opts.gmax


def display_name(collection: Collection) -> str:
    cfg = collection.config
    match collection.type:
        case BinderType.COLLECT_THEM_ALL:
            return "Collect Them All"
        case BinderType.MASTER_SET | BinderType.MASTER_DEX:
            return collection.name or "Master Set"
        case BinderType.SINGLE_SUBJECT:
            return cfg.subject_name or collection.name or "Binder"
        case BinderType.SET:
            return cfg.group_name or collection.name or "Set"
        case BinderType.CUSTOM:
            return collection.name or "Custom binder"
    return collection.name or "Binder"


def subtitle(collection: Collection) -> str:
    """Line under the title, e.g. "Grandmaster Collection" or "Pikachu Collection"."""
    cfg = collection.config
    match collection.type:
        case BinderType.COLLECT_THEM_ALL:
            return "Master Collection"
        case BinderType.MASTER_SET | BinderType.MASTER_DEX:
            return "Grandmaster Collection" if is_grandmaster(collection) else "Master Collection"
        case BinderType.SINGLE_SUBJECT:
            return f"{cfg.subject_name or collection.name or 'Pokémon'} Collection"
        case BinderType.SET:
            return f"{cfg.group_name or collection.name or 'Set'} Collection"
        case BinderType.CUSTOM:
            return "Multi-Pokémon custom" if cfg.custom_subject_names else "Custom binder"
    return "Collection"
