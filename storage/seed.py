"""
Sample data loaded into empty collections for development and demos.
"""

from typing import Any, Callable, Dict, List

SEED_BOOKS: List[Dict[str, Any]] = [
    {"id": 1, "title": "The Fellowship of the Ring", "author": "J.R.R. Tolkien"},
    {"id": 2, "title": "Harry Potter and the Philosopher's Stone", "author": "J.K. Rowling"},
    {"id": 3, "title": "The Two Towers", "author": "J.R.R. Tolkien"},
    {"id": 4, "title": "Harry Potter and the Chamber of Secrets", "author": "J.K. Rowling"},
    {"id": 5, "title": "The Return of the King", "author": "J.R.R. Tolkien"},
]

SEED_RECIPES: List[Dict[str, Any]] = [
    {"id": 1, "name": "Pancakes", "ingredients": ["flour", "milk", "eggs"]},
    {"id": 2, "name": "Classic Beef Tacos", "ingredients": ["ground beef", "taco shells", "lettuce", "cheese"]},
    {"id": 3, "name": "Vegetarian Lasagna", "ingredients": ["lasagna noodles", "marinara sauce", "ricotta", "spinach"]},
]

# Plaintext passwords only live here; they are hashed before insertion.
_SEED_USERS: List[Dict[str, Any]] = [
    {
        "email": "harry@hogwarts.edu",
        "password": "potter",
        "securityQuestions": [
            {"question": "What is your pet's name?", "answer": "Hedwig"},
            {"question": "What is your favorite book?", "answer": "Quidditch Through the Ages"},
            {"question": "What is your mother's maiden name?", "answer": "Evans"},
        ],
    },
    {
        "email": "hermione@hogwarts.edu",
        "password": "granger",
        "securityQuestions": [
            {"question": "What is your pet's name?", "answer": "Crookshanks"},
            {"question": "What is your favorite book?", "answer": "Hogwarts: A History"},
            {"question": "What is your mother's maiden name?", "answer": "Wilkins"},
        ],
    },
    {
        "email": "ron@hogwarts.edu",
        "password": "weasley",
        "securityQuestions": [
            {"question": "What is your pet's name?", "answer": "Scabbers"},
            {"question": "What is your favorite book?", "answer": "Quidditch Through the Ages"},
            {"question": "What is your mother's maiden name?", "answer": "Prewett"},
        ],
    },
]


def build_seed_users(hash_password: Callable[[str], str]) -> List[Dict[str, Any]]:
    """
    Return the sample accounts with their passwords hashed.

    Args:
        hash_password: One-way hash applied to each plaintext password

    Returns:
        List of account documents ready for insertion
    """
    users = []
    for user in _SEED_USERS:
        users.append({
            "email": user["email"],
            "password": hash_password(user["password"]),
            "securityQuestions": [dict(question) for question in user["securityQuestions"]],
        })
    return users
