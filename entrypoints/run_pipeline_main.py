import runpy
import traceback

def main():
    try:
        # Equivalent to: python -m vehicle_telemetry.dev.run_pipeline
        runpy.run_module("vehicle_telemetry.dev.run_pipeline", run_name="__main__")
    except Exception:
        traceback.print_exc()
        input("\nPress Enter to exit...")

if __name__ == "__main__":
    main()
