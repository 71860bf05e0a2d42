from .crypto import CryptoRecord
from .weather import WeatherRecord
from .news import NewsRecord
