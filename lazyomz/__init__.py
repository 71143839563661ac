"""lazyomz — bootstrap zsh, oh-my-zsh and the lazyomz theme for a user."""

__version__ = "0.1.0"
