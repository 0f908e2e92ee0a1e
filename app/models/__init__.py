from app.models.artwork import Artwork
from app.models.customer import Customer
from app.models.order import Order
from app.models.drop import Drop
from app.models.cart import CartItem

# add ALL models here
