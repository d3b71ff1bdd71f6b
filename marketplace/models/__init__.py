from marketplace.models.profile import Profile
from marketplace.models.category import Category
from marketplace.models.product import Product
from marketplace.models.review import Review
from marketplace.models.cart import CartItem
from marketplace.models.promotion import Promotion
from marketplace.models.carrier import Carrier
from marketplace.models.order_item import OrderItem
from marketplace.models.order import Order
from marketplace.models.order_event import OrderEvent

# add ALL models here
