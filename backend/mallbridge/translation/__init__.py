from .translator import Translator
from .product_translation import translate_product


__all__ = ["Translator", "translate_product"]
