from .formid import GlobalFormId
from .ingredient import Ingredient, IngredientEffect
from .magiceffect import MagicEffect
from .loadorder import LoadOrder
from .gamedata import GameData
from .potion import Potion, PotionEffect
from .potionslist import PotionsList
