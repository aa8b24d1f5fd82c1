# portfolio/scripts/generate_password_hash.py
import getpass

from portfolio.security import hash_password

def run():
    password = getpass.getpass("Admin password: ")
    if not password:
        print("No password given. Nothing to do.")
        return
    print("Password hash for environment variable:")
    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")

if __name__ == "__main__":
    run()
