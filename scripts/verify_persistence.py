"""
Restart persistence check.

Starts the service, rents a car, restarts the service and confirms the
rental is still listed. Only meaningful when the database is reachable;
on the in-memory fallback the check reports that data was lost.
"""

import time
import subprocess
import httpx
import sys
import os
import signal

PORT = os.environ.get("PORT", "3000")
BASE_URL = f"http://127.0.0.1:{PORT}"


def start_server():
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "car_rental.app.main:app", "--host", "127.0.0.1", "--port", PORT],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server()

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        storage = httpx.get(f"{BASE_URL}/metrics").json()["storage"]
        print(f"Storage backend: {storage}")

        # 2. Rent the first available car
        print("\n--- [Step 2] Creating Rental (Persistence Test) ---")
        cars = httpx.get(f"{BASE_URL}/api/cars").json()
        free = [car for car in cars if car["available"]]
        if not free:
            raise Exception("No available car to rent")

        resp = httpx.post(f"{BASE_URL}/api/rentals", json={
            "car_id": free[0]["id"],
            "renter_name": "persistence-check",
            "start_date": "2025-01-01",
            "end_date": "2025-01-03",
        })
        if resp.status_code != 201:
            raise Exception(f"Rental creation failed: {resp.status_code} {resp.text}")
        rental_id = resp.json()["id"]
        print(f"✅ Rental {rental_id} created")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2)  # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        rentals = httpx.get(f"{BASE_URL}/api/rentals").json()
        if any(r["id"] == rental_id and r["renter_name"] == "persistence-check" for r in rentals):
            print("✅ Rental persisted across restart")
        else:
            print(f"❌ Rental {rental_id} missing after restart (storage was: {storage})")
            sys.exit(1)

        # Clean up; the car stays unavailable until returned
        httpx.put(f"{BASE_URL}/api/rentals/{rental_id}", json={"status": "returned"})
    finally:
        print("\n--- [Step 5] Stopping Server ---")
        stop_server(proc2)


if __name__ == "__main__":
    run_verification()
